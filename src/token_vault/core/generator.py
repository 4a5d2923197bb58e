"""
Token generation.

Tokens are drawn from a cryptographically secure source, hashed with
SHA-256 for a uniform distribution and encoded with the URL-safe base64
alphabet without padding.
"""

import base64
import hashlib
import secrets

DEFAULT_TOKEN_LENGTH = 16
DEFAULT_RANDOM_BYTES = 16

# SHA-256 digest is 32 bytes, which encodes to 43 base64 characters
_MAX_TOKEN_LENGTH = 43


class TokenGenerator:
    """Mints fixed-length, URL-safe candidate tokens.

    The generator does not know about the vault, so it cannot promise
    that a token is unused. Callers check candidates against the live
    vault (see VaultStore.mint_token).

    Example:
        >>> generator = TokenGenerator()
        >>> token = generator.mint()
        >>> len(token)
        16
    """

    def __init__(
        self,
        token_length: int = DEFAULT_TOKEN_LENGTH,
        random_bytes: int = DEFAULT_RANDOM_BYTES,
    ) -> None:
        """Initialize the generator.

        Args:
            token_length: Number of characters in each token (1-43).
            random_bytes: Number of secure random bytes hashed per token.
        """
        if not 1 <= token_length <= _MAX_TOKEN_LENGTH:
            raise ValueError(
                f"token_length must be between 1 and {_MAX_TOKEN_LENGTH}, got {token_length}"
            )
        if random_bytes < 1:
            raise ValueError(f"random_bytes must be positive, got {random_bytes}")

        self.token_length = token_length
        self.random_bytes = random_bytes

    def mint(self) -> str:
        """Generate a new candidate token.

        Returns:
            A token of exactly ``token_length`` URL-safe characters.
        """
        digest = hashlib.sha256(secrets.token_bytes(self.random_bytes)).digest()
        encoded = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
        return encoded[: self.token_length]

    def __repr__(self) -> str:
        return f"TokenGenerator(token_length={self.token_length})"
