import re
import signal
import threading
import time
from datetime import datetime

import pytest

from videopipe import timeutil


def test_date_now_format():
    before = datetime.now().strftime("%Y-%m-%d")
    value = timeutil.date_now()
    after = datetime.now().strftime("%Y-%m-%d")
    assert value in {before, after}


def test_time_now_format_and_prefix():
    text = timeutil.time_now()
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", text)
    assert text[:4] == timeutil.date_now()[:4]


def test_gmtime_epoch_shifted():
    assert timeutil.gmtime(0) == "Thu, 01 Jan 1970 08:00:00 GMT"


def test_gmtime_now_format():
    t0 = int(time.time())
    text = timeutil.gmtime_now()
    t1 = int(time.time())
    assert text[-4:] == " GMT"
    assert text in {timeutil.gmtime(t) for t in range(t0, t1 + 1)}


def test_gmtime2ctime_reads_local_time():
    expected = int(datetime(2015, 8, 22, 11, 48, 50).timestamp())
    assert timeutil.gmtime2ctime("Sat, 22 Aug 2015 11:48:50 GMT") == expected


def test_gmtime2ctime_matches_gmtime_fields():
    text = timeutil.gmtime(1_000_000)
    parsed = timeutil.gmtime2ctime(text)
    assert time.strftime("%d %H:%M:%S", time.localtime(parsed)) == text[5:7] + text[16:25]


@pytest.mark.parametrize("bad", ["not a date", "Sat, 22 Foo 2015 11:48:50 GMT"])
def test_gmtime2ctime_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        timeutil.gmtime2ctime(bad)


def test_timestamp_now_in_milliseconds():
    before = int(time.time() * 1000)
    value = timeutil.timestamp_now()
    after = int(time.time() * 1000)
    assert before - 1 <= value <= after + 1


def test_timestamp_now_float_close_to_int():
    a = timeutil.timestamp_now()
    b = timeutil.timestamp_now_float()
    assert abs(b - a) < 1000


def test_sleep_waits():
    start = time.monotonic()
    result = timeutil.sleep(30)
    elapsed = time.monotonic() - start
    assert result is None
    assert elapsed >= 0.025


def test_while_loop_returns_signal_number():
    timer = threading.Timer(0.2, signal.raise_signal, args=(signal.SIGINT,))
    timer.start()
    try:
        result = timeutil.while_loop()
    finally:
        timer.cancel()
    assert result == int(signal.SIGINT)