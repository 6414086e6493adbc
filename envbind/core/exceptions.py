# 3 sections with separation comments
#│   │   ├── SECTION 1: Base exceptions
#│   │   ├── SECTION 2: Fallback file exceptions
#│   │   └── SECTION 3: Binding exceptions
"""
================================================================================
FILE: envbind/core/exceptions.py
================================================================================

PURPOSE:
    Exception hierarchy for the configuration loader. Every failure that can
    stop a load is one of these types, so callers can catch ConfigLoadError
    and refuse to start the service.

WORKFLOW:
    1. Define base exception class (ConfigLoadError)
    2. Define fallback file exceptions:
       - FallbackFileError: file cannot be opened, read or decoded
       - FallbackParseError: a line has an empty key
    3. Define binding exceptions:
       - ValidationError: required value missing or empty
       - CoercionError: raw string does not convert to the field kind
       - BindingTypeError / UnsupportedKindError: bad target or descriptor

IMPORTS:
    - None (only Python builtins)

KEY FACTS:
    - NO imports from other envbind modules (prevents circular dependencies)
    - All exceptions are fatal: a load either succeeds or stops at the first
      error, there is no retry
    - Each exception has an error_code for categorization
    - BindingTypeError is also a builtin TypeError

TESTING ENVIRONMENT:
    - pytest.raises(ValidationError) etc.
    - Check error_code and context keys, not message wording
"""

# ================================================================================
# IMPORTS
# ================================================================================

from typing import Optional, Dict, Any

# ================================================================================
# SECTION 1: BASE EXCEPTIONS
# ================================================================================

class ConfigLoadError(Exception):
    """
    Root exception for all configuration loading errors.

    Attributes:
        message (str): Human-readable error message
        error_code (str): Machine-readable error code for categorization
        context (dict): Additional context (key, line, path, ...)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_LOAD_ERROR",
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    @property
    def key(self) -> Optional[str]:
        """Configuration key the error refers to, if any."""
        return self.context.get("key")

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dict for structured logging"""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context
        }

# ================================================================================
# SECTION 2: FALLBACK FILE EXCEPTIONS
# ================================================================================

class FallbackFileError(ConfigLoadError):
    """Fallback file could not be opened, read or decoded"""

    def __init__(self, message: str, context: Optional[Dict] = None):
        super().__init__(message, error_code="FILE_ERROR", context=context)


class FallbackParseError(ConfigLoadError):
    """Fallback file line has an unparseable key"""

    def __init__(self, message: str, context: Optional[Dict] = None):
        super().__init__(message, error_code="PARSE_ERROR", context=context)

    @property
    def line(self) -> Optional[str]:
        return self.context.get("line")

    @property
    def line_number(self) -> Optional[int]:
        return self.context.get("line_number")

# ================================================================================
# SECTION 3: BINDING EXCEPTIONS
# ================================================================================

class ValidationError(ConfigLoadError):
    """Required value is missing, or empty without allow_empty"""

    def __init__(self, message: str, context: Optional[Dict] = None):
        super().__init__(message, error_code="VALIDATION_ERROR", context=context)


class CoercionError(ConfigLoadError):
    """Resolved raw value cannot be converted to the declared kind"""

    def __init__(self, message: str, context: Optional[Dict] = None):
        super().__init__(message, error_code="COERCION_ERROR", context=context)


class BindingTypeError(ConfigLoadError, TypeError):
    """Target is not a writable object, or a descriptor is malformed"""

    def __init__(
        self,
        message: str,
        context: Optional[Dict] = None,
        error_code: str = "TYPE_ERROR"
    ):
        super().__init__(message, error_code=error_code, context=context)


class UnsupportedKindError(BindingTypeError):
    """Descriptor declares a target kind the coercer does not handle"""

    def __init__(self, message: str, context: Optional[Dict] = None):
        super().__init__(message, context=context, error_code="UNSUPPORTED_KIND")
