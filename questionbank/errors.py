"""Error kinds raised while generating question bank content."""


class GenerationError(Exception):
    """Base class for failures of the external generator."""

    condition = "generation_failed"
    terminal = False

    def __init__(self, message: str = "", *, cause: Exception = None):
        super().__init__(message or self.__class__.__doc__)
        self.cause = cause


class RateLimitedError(GenerationError):
    """The generator kept rate limiting us after every retry."""

    condition = "rate_limited"
    terminal = True


class QuotaExhaustedError(GenerationError):
    """The generator account is out of quota or credits."""

    condition = "quota_exhausted"
    terminal = True


class MalformedOutputError(GenerationError):
    """The generator returned output that could not be parsed."""

    condition = "malformed_output"


class TransientGeneratorError(GenerationError):
    """The generator was unreachable or temporarily unavailable."""

    condition = "generator_unavailable"


class GeneratorNotConfiguredError(GenerationError):
    """No generator API key is configured."""

    condition = "generator_not_configured"
    terminal = True
