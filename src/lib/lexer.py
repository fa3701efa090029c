"""
Custom Pygments lexer for directive comments

Highlights directive lines when the runner lists the directives of a
script. The expression part is handed to the Python lexer.

Token types:
- Comment.Preproc: '#' and the sigil
- Punctuation: Braces
- Name.Label: Optional label including its colon
- (Python tokens): The expression
- Comment: Any other line
"""

from pygments.lexer import RegexLexer, bygroups, using
from pygments.lexers import PythonLexer
from pygments.token import Comment, Name, Punctuation, Text, Whitespace


class DirectiveLexer(RegexLexer):
    """
    Lexer for printexpr directive lines

    Example:
        #${ calc: len(a) * 2 }

    Tokens:
        #$ → Comment.Preproc
        { → Punctuation
        calc: → Name.Label
        len(a) * 2 → Python tokens
        } → Punctuation
    """

    name = 'PrintExpr'
    aliases = ['printexpr']
    filenames = []

    tokens = {
        'root': [
            (r'^([ \t]*)(#[%@$\\"#])(\{)([ \t]*)((?:[A-Za-z_]\w*:)?)([ \t]*)(.*?)([ \t]*)(\})([ \t]*)$',
             bygroups(Whitespace, Comment.Preproc, Punctuation, Whitespace, Name.Label,
                      Whitespace, using(PythonLexer), Whitespace, Punctuation, Whitespace)),

            # Anything else is shown as a plain comment or text
            (r'[ \t]*#[^\n]*', Comment),
            (r'[^\n]+', Text),
            (r'\n', Whitespace),
        ],
    }


def get_lexer() -> DirectiveLexer:
    """
    Get the DirectiveLexer instance

    Returns:
        DirectiveLexer instance ready for use with Pygments
    """
    return DirectiveLexer()
