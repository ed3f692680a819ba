"""Discount code string generation"""

import secrets
import string
from src.app.repositories.discount_code_repository import DiscountCodeRepository

# O, 0, I and 1 are left out so codes read back unambiguously
AMBIGUOUS_CHARACTERS = "O0I1"
CODE_ALPHABET = "".join(
    char for char in string.ascii_uppercase + string.digits if char not in AMBIGUOUS_CHARACTERS
)


class CodeGenerationError(Exception):
    pass


class DiscountCodeGenerator:
    """Random prefixed codes, e.g. AUTO4K7QX2PZ, checked against existing codes"""

    def __init__(
        self,
        code_repo: DiscountCodeRepository,
        prefix: str = "AUTO",
        length: int = 8,
        max_attempts: int = 10,
    ):
        self.code_repo = code_repo
        self.prefix = prefix.upper()
        self.length = length
        self.max_attempts = max_attempts

    def candidate(self) -> str:
        return self.prefix + "".join(secrets.choice(CODE_ALPHABET) for _ in range(self.length))

    async def generate(self) -> str:
        for _ in range(self.max_attempts):
            code = self.candidate()
            if not await self.code_repo.code_exists(code):
                return code
        raise CodeGenerationError(f"No unique code after {self.max_attempts} attempts")
