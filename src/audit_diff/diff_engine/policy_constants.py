"""Built-in redaction and ignore policy constants."""

REDACTED = "REDACTED"

GLOBAL_REDACT_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwordConfirm",
        "secret",
        "token",
        "resetToken",
        "apiKey",
        "privateKey",
        "refreshToken",
        "accessToken",
        "sessionToken",
        "sessionSecret",
        "salt",
        "hash",
        "loginAttempts",
        "lockUntil",
        "sessions",
        "cvc",
    }
)

GLOBAL_IGNORE_KEYS: frozenset[str] = frozenset({"loginAt", "lastLogin", "audit"})
