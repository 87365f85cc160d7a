"""nytric: a small dynamically-typed, prefix-notation scripting language.

Program flow:
    1. Tokenizer (lang/lexical.py): source text -> tokens, with IMP directives expanded in place
    2. Parser (lang/parser.py): tokens -> syntax tree (lang/syntax.py), using a pre-scan of declared functions to
       know how many arguments every call takes
    3. Evaluator (lang/evaluator.py): walks the syntax tree with a stack of variable frames

lang/session.py ties the three together; lang/error.py holds every error the pipeline can raise.
"""

from nytric.lang.error import ErrorHandler, GenericException
from nytric.lang.evaluator import Evaluator
from nytric.lang.lexical import Token, Tokenizer, tokenize
from nytric.lang.parser import Parser, parse
from nytric.lang.session import Session


def run(source, stdout=None, stdin=None):
    """Tokenizes, parses and evaluates source in a fresh Evaluator, which is returned. Errors propagate."""
    evaluator = Evaluator(stdout=stdout, stdin=stdin)
    evaluator.evaluate(parse(tokenize(source)))
    return evaluator
