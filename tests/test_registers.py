from __future__ import annotations
import pytest # type: ignore
import numpy as np # type: ignore
from hllcount.lib.registers import (MAX_PACKED_RANK, PackedRegisters, StandardRegisters,
                                    create_registers)

@pytest.mark.quick
class TestStandardRegistersQuick:
    def test_init(self):
        regs = StandardRegisters(256)
        assert regs.size() == 256
        assert regs.to_array().dtype == np.uint32
        assert not regs.to_array().any()

    def test_set_get(self):
        regs = StandardRegisters(16)
        regs.set(3, 12)
        assert regs.get(3) == 12
        assert regs.get(2) == 0

    def test_clear(self):
        regs = StandardRegisters(16)
        buffer = regs.registers
        for i in range(16):
            regs.set(i, i + 1)
        regs.clear()
        assert not regs.to_array().any()
        assert regs.registers is buffer

    def test_memory_usage(self):
        assert StandardRegisters(256).memory_usage() == 1024

    def test_rejects_negative_rank(self):
        with pytest.raises(ValueError):
            StandardRegisters(16).set(0, -1)

    def test_index_out_of_range(self):
        regs = StandardRegisters(16)
        with pytest.raises(IndexError):
            regs.get(16)
        with pytest.raises(IndexError):
            regs.set(-1, 7)
        assert regs.get(15) == 0

@pytest.mark.parametrize("storage", ["standard", "packed"])
@pytest.mark.quick
def test_negative_index_rejected_by_both_storages(storage):
    regs = create_registers(storage, 16)
    with pytest.raises(IndexError):
        regs.get(-1)
    with pytest.raises(IndexError):
        regs.set(-1, 7)
    assert not regs.to_array().any()

@pytest.mark.quick
class TestPackedRegistersQuick:
    def test_init(self):
        regs = PackedRegisters(256)
        assert regs.size() == 256
        assert regs.to_array().shape == (256,)
        assert not regs.to_array().any()

    def test_all_values_round_trip(self):
        regs = PackedRegisters(64)
        for i in range(64):
            regs.set(i, i % 32)
        for i in range(64):
            assert regs.get(i) == i % 32
        np.testing.assert_array_equal(regs.to_array(), np.arange(64) % 32)

    def test_neighbours_are_untouched(self):
        regs = PackedRegisters(16)
        regs.set(0, 31)
        regs.set(1, 31)
        regs.set(2, 31)
        regs.set(1, 0)
        assert regs.get(0) == 31
        assert regs.get(1) == 0
        assert regs.get(2) == 31

    def test_saturates_at_31(self):
        regs = PackedRegisters(16)
        regs.set(5, 40)
        assert regs.get(5) == MAX_PACKED_RANK == 31
        assert regs.get(4) == 0
        assert regs.get(6) == 0

    def test_last_register(self):
        regs = PackedRegisters(16)
        regs.set(15, 29)
        assert regs.get(15) == 29
        assert regs.to_array()[15] == 29

    def test_index_out_of_range(self):
        regs = PackedRegisters(16)
        with pytest.raises(IndexError):
            regs.get(16)
        with pytest.raises(IndexError):
            regs.set(-1, 3)

    def test_memory_usage_truncates(self):
        assert PackedRegisters(256).memory_usage() == 160
        assert PackedRegisters(16).memory_usage() == 10
        assert PackedRegisters(3).memory_usage() == 1

    def test_clear(self):
        regs = PackedRegisters(32)
        for i in range(32):
            regs.set(i, 17)
        regs.clear()
        assert not regs.to_array().any()

@pytest.mark.quick
def test_create_registers():
    assert isinstance(create_registers("standard", 16), StandardRegisters)
    assert isinstance(create_registers("packed", 16), PackedRegisters)
    with pytest.raises(ValueError, match="Invalid storage type"):
        create_registers("sparse", 16)
