"""随机证件数据生成."""

from __future__ import annotations

import random
import string
from typing import Optional

FIRST_NAMES: tuple[str, ...] = (
    "Jean", "Marie", "Pierre", "Sophie", "Lucas", "Camille", "Thomas", "Léa",
    "Nicolas", "Chloé", "Julien", "Manon", "Antoine", "Emma", "David", "Inès",
    "Gabriel", "Sarah", "Léo", "Alice", "Arthur", "Juliette", "Louis", "Eva",
    "Carlos", "Ana", "Miguel", "Lucia", "Javier", "Elena", "Alejandro", "Carmen",
)

LAST_NAMES: tuple[str, ...] = (
    "Martin", "Bernard", "Dubois", "Thomas", "Robert", "Richard", "Petit", "Durand",
    "Leroy", "Moreau", "Simon", "Laurent", "Lefebvre", "Michel", "Garcia", "David",
    "Rodriguez", "Lopez", "Sanchez", "Perez", "Gomez", "Fernandez", "Diaz", "Torres",
)


class Randomizer:
    """随机姓名与证件号生成器.

    Example:
        >>> randomizer = Randomizer(random.Random(42))
        >>> randomizer.random_id()
        '...-X'
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        """初始化生成器.

        Args:
            rng: 随机数生成器，测试时可传入固定种子的实例
        """
        self._rng = rng or random.Random()

    def random_name(self) -> str:
        """随机全名，格式为 "名 姓"."""
        first = self._rng.choice(FIRST_NAMES)
        last = self._rng.choice(LAST_NAMES)
        return f"{first} {last}"

    def random_id(self) -> str:
        """随机证件号：8 或 9 位数字、短横线、一个大写字母."""
        digit_count = self._rng.randint(8, 9)
        digits = "".join(self._rng.choice(string.digits) for _ in range(digit_count))
        letter = self._rng.choice(string.ascii_uppercase)
        return f"{digits}-{letter}"
