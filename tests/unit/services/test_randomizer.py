"""随机证件数据单元测试."""

import random
import re

import pytest

from src.services.randomizer import FIRST_NAMES, LAST_NAMES, Randomizer

ID_PATTERN = re.compile(r"^\d{8,9}-[A-Z]$")


class TestRandomizer:
    """随机生成器测试."""

    @pytest.mark.parametrize("seed", range(20))
    def test_id_format(self, seed):
        """测试证件号为 8-9 位数字、短横线和一个大写字母."""
        assert ID_PATTERN.match(Randomizer(random.Random(seed)).random_id())

    def test_id_lengths_both_occur(self):
        """测试 8 位与 9 位都会出现."""
        randomizer = Randomizer(random.Random(7))
        lengths = {len(randomizer.random_id().split("-")[0]) for _ in range(200)}
        assert lengths == {8, 9}

    def test_name_from_lists(self):
        """测试姓名取自名、姓列表."""
        randomizer = Randomizer(random.Random(3))
        for _ in range(50):
            first, last = randomizer.random_name().split(" ")
            assert first in FIRST_NAMES
            assert last in LAST_NAMES

    def test_seeded_is_deterministic(self):
        """测试相同种子产生相同序列."""
        a = Randomizer(random.Random(42))
        b = Randomizer(random.Random(42))
        assert [a.random_name() for _ in range(5)] == [b.random_name() for _ in range(5)]
        assert a.random_id() == b.random_id()

    def test_default_rng(self):
        """测试不传随机数生成器."""
        assert ID_PATTERN.match(Randomizer().random_id())
