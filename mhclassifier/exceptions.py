# mhclassifier/exceptions.py
"""
Exceptions shared across the project.

- KeywordProfileError  : keyword profile YAML missing or malformed
- TextValidationError  : request text rejected before classification
- UpstreamError        : hosted model call or response parsing failed
"""


class KeywordProfileError(IOError):
    """Keyword profile file could not be loaded or validated."""
    pass


class TextValidationError(ValueError):
    """Input text is missing, too short or too long."""
    pass


class UpstreamError(RuntimeError):
    """Hosted model call, response format or parsing error."""
    pass
