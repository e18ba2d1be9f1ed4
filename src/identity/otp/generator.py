"""Code generation for one-time codes."""

import secrets


class CodeGenerator:
    """Produces fixed-length numeric codes, or a configured override.

    When ``master_code`` is set every generated code is that value, which lets
    controlled environments sign in without reading a real inbox or phone.
    """

    def __init__(self, length: int = 6, master_code: str | None = None):
        if length < 1:
            raise ValueError("Code length must be positive")
        self.length = length
        self.master_code = master_code or None

    @property
    def bypass(self) -> bool:
        return self.master_code is not None

    def generate(self) -> str:
        if self.master_code is not None:
            return self.master_code
        # Uniform over the full range, so leading zeros are possible.
        return str(secrets.randbelow(10**self.length)).zfill(self.length)
