"""Short code generation utilities."""

import base64
import random
import string


class ShortCodeGenerator:
    """Generate random short codes for links."""

    # URL-safe base64 alphabet (case-sensitive)
    URLSAFE_CHARS = string.ascii_letters + string.digits + "-_"

    def __init__(self, num_bytes: int = 4, rng: random.Random = None):
        """Initialize short code generator.

        Args:
            num_bytes: Random bytes behind each code (4 bytes -> 6 characters)
            rng: Optional random source, mostly for deterministic tests
        """
        self.num_bytes = num_bytes
        self.rng = rng or random.Random()

    def generate(self) -> str:
        """Generate a random short code.

        Uniqueness is not guaranteed here; the store retries on collision.

        Returns:
            Unpadded URL-safe base64 encoding of fresh random bytes
        """
        raw = self.rng.randbytes(self.num_bytes)
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code only uses URL-safe base64 characters.

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return bool(code) and all(c in ShortCodeGenerator.URLSAFE_CHARS for c in code)
