"""Error handling for the nytric language. Only GenericExceptions should be encountered during running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every error is fatal to the run it occurs in. There is no way to catch an error from inside a nytric program.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a nytric error/warning. exprs are
    interpolated into msg and bolded.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, context=None):
        """Parses args for GenericException or warning. context is the offending token or node, if any."""
        if exprs is None:
            exprs = [""]
            self.msg = msg  # nothing to interpolate, so msg may contain literal braces
        else:
            if isinstance(exprs, str):
                exprs = [exprs]
            self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))

        self.expr = str(exprs[0])  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        self.context = context

        super().__init__(self.msg)


class LexError(GenericException):
    """No token pattern matches the remaining source."""


class ImportFileError(GenericException):
    """An IMP directive names a file that cannot be read."""


class ParseError(GenericException):
    """Unexpected or mismatched token."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("diagnosis", False)
        super().__init__(msg, exprs, **kwargs)


class RuntimeFailure(GenericException):
    """Superclass for errors raised while evaluating a program."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("diagnosis", False)
        super().__init__(msg, exprs, **kwargs)


class UndefinedVariable(RuntimeFailure):
    pass


class UndefinedFunction(RuntimeFailure):
    pass


class ArityMismatch(RuntimeFailure):
    pass


class OperandTypeError(RuntimeFailure):
    """Operator applied to a textual operand it cannot handle."""


class DivisionByZero(RuntimeFailure):
    pass


class DomainError(RuntimeFailure):
    """Math function called outside of its domain (square root of a negative number)."""


class UnknownNodeKind(RuntimeFailure):
    """Raised for malformed syntax trees. The parser never produces these."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("internal", True)
        super().__init__(msg, exprs, **kwargs)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom nytric errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = []

    def register_file(self, path):
        """Pushes path onto traceback. Called when tokenization of a file starts."""
        self.traceback.append(path)

    def remove_file(self, path):
        """Removes path from traceback. Called after a file has been tokenized without error."""
        if path in self.traceback:
            self.traceback.remove(path)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        """Returns 'file: ' prefix for the innermost registered file, or an empty string."""
        if not self.traceback:
            return ""
        return colored(f"{self.traceback[-1]}: ", attrs=["bold"])

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = self._location()
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Prints error using self.traceback. error must be a GenericException. If more than one file is registered
        in the traceback (the error happened inside an imported file), the chain of files is printed first.
        """
        error_msg = ""
        if len(self.traceback) > 1:
            error_msg = "Traceback:\n"
            for file in self.traceback:
                error_msg += f"  File '{file}'\n"

        error_msg += self._location()
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = []  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
