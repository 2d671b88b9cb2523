import pytest

from videopipe.memory import CURRENT_DEVICE_ID, MixMemory


def test_new_memory_is_empty_and_owned():
    mem = MixMemory()
    assert mem.cpu() is None
    assert mem.gpu() is None
    assert mem.cpu_size == 0
    assert mem.gpu_size == 0
    assert mem.owner_cpu is True
    assert mem.owner_gpu is True


def test_current_device_default_matches_explicit_zero():
    assert MixMemory(CURRENT_DEVICE_ID).device_id == MixMemory(0).device_id


def test_explicit_device_id_kept():
    assert MixMemory(3).device_id == 3


def test_invalid_device_id_raises():
    with pytest.raises(ValueError):
        MixMemory(-5)


@pytest.mark.parametrize("side", ["cpu", "gpu"])
def test_allocation_is_zeroed_with_requested_size(side):
    mem = MixMemory()
    buf = getattr(mem, side)(16)
    assert len(buf) == 16
    assert bytes(buf) == bytes(16)
    assert getattr(mem, f"{side}_size") == 16


@pytest.mark.parametrize("side", ["cpu", "gpu"])
def test_smaller_request_keeps_buffer(side):
    mem = MixMemory()
    first = getattr(mem, side)(32)
    first[0] = 7
    second = getattr(mem, side)(8)
    assert second is first
    assert second[0] == 7
    assert getattr(mem, f"{side}_size") == 32


@pytest.mark.parametrize("side", ["cpu", "gpu"])
def test_larger_request_reallocates_zeroed(side):
    mem = MixMemory()
    first = getattr(mem, side)(4)
    first[0] = 9
    second = getattr(mem, side)(64)
    assert second is not first
    assert len(second) == 64
    assert second[0] == 0


def test_release_sides_independently():
    mem = MixMemory()
    mem.cpu(8)
    mem.gpu(8)
    mem.release_cpu()
    assert mem.cpu() is None and mem.cpu_size == 0
    assert mem.gpu_size == 8
    mem.release_gpu()
    assert mem.gpu() is None and mem.gpu_size == 0


def test_release_all():
    mem = MixMemory()
    mem.cpu(8)
    mem.gpu(8)
    mem.release_all()
    assert (mem.cpu(), mem.gpu(), mem.cpu_size, mem.gpu_size) == (None, None, 0, 0)


def test_reference_data_shares_memory():
    host = bytearray(b"abcd")
    device = bytearray(6)
    mem = MixMemory()
    mem.reference_data(host, device)
    assert mem.cpu_size == len(host)
    assert mem.gpu_size == len(device)
    assert mem.owner_cpu is False
    assert mem.owner_gpu is False
    mem.cpu()[0] = ord("z")
    assert host[0] == ord("z")
    mem.gpu()[5] = 1
    assert device[5] == 1


def test_reference_empty_buffers_are_ignored():
    mem = MixMemory()
    mem.cpu(8)
    mem.reference_data(bytearray(), None)
    assert mem.cpu() is None
    assert mem.gpu() is None
    assert mem.owner_cpu is True
    assert mem.owner_gpu is True


def test_reference_one_side_only():
    host = bytearray(10)
    mem = MixMemory()
    mem.reference_data(host, None)
    assert mem.owner_cpu is False
    assert mem.owner_gpu is True
    assert mem.cpu_size == len(host)


def test_constructor_references_buffers():
    host = bytearray(b"xy")
    mem = MixMemory(cpu=host)
    assert bytes(mem.cpu()) == bytes(host)
    assert mem.owner_cpu is False


def test_context_manager_releases():
    with MixMemory() as mem:
        mem.gpu(12)
        assert mem.gpu_size == 12
    assert mem.gpu() is None