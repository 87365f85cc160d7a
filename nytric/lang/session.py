"""Session control for the nytric language. Runs the tokenize -> parse -> evaluate pipeline on a file or on a string
of source code.
"""

import os

from nytric.lang.error import GenericException
from nytric.lang.evaluator import Evaluator
from nytric.lang.lexical import Tokenizer, read_source
from nytric.lang.parser import Parser


class Session:
    """Governs nytric runs for one file (or for strings, when path is SH_FILE). Every run starts from a fresh
    Tokenizer, Parser and Evaluator, so nothing carries over between runs.
    """
    SH_FILE = "<in>"  # filename used for source not read from a file

    def __init__(self, error_handler, path=SH_FILE, reader=read_source, stdout=None, stdin=None):
        self.error_handler = error_handler
        self.path = path      # used for error messages and to resolve IMP directives
        self.reader = reader  # path -> text, or None if it cannot be read

        self.stdout = stdout
        self.stdin = stdin

    @property
    def base_dir(self):
        """Directory IMP paths are resolved against."""
        if self.path == Session.SH_FILE:
            return os.getcwd()
        return os.path.dirname(os.path.abspath(self.path))

    def load(self):
        """Returns the text of self.path. Raises a GenericException if it cannot be read."""
        if self.path == Session.SH_FILE:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

        source = self.reader(self.path)
        if source is None:
            raise GenericException("'{}' could not be opened", self.path, diagnosis=False)
        return source

    def tokenize(self, source):
        file_path = None if self.path == Session.SH_FILE else self.path
        tokenizer = Tokenizer(source, self.base_dir, path=file_path, reader=self.reader,
                              error_handler=self.error_handler)
        return tokenizer.tokenize()

    def run(self, source=None):
        """Runs source (or the session file, if source is None) and returns the Evaluator it ran in. Raises the first
        error encountered; the caller's ErrorHandler is expected to report it.
        """
        if source is None:
            source = self.load()

        self.error_handler.register_file(self.path)

        program = Parser(self.tokenize(source)).parse()
        evaluator = Evaluator(stdout=self.stdout, stdin=self.stdin)
        evaluator.evaluate(program)

        self.error_handler.remove_file(self.path)
        return evaluator
