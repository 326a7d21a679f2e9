"""Tests for the provider debug log."""
import threading

from cloudportal.core.debug_log import DebugLog, token_fingerprint


def test_disabled_log_creates_no_file(tmp_path):
    path = tmp_path / "provider-debug.log"
    log = DebugLog(False, path)
    log.debug("hidden")
    log.info("hidden")
    log.error("hidden")
    log.close()
    assert not path.exists()


def test_file_is_opened_lazily(tmp_path):
    path = tmp_path / "provider-debug.log"
    log = DebugLog(True, path)
    assert not path.exists()
    assert log.is_open is False

    log.info("start")
    assert log.is_open is True
    log.close()
    assert path.exists()


def test_lines_carry_severity_prefix(tmp_path):
    path = tmp_path / "provider-debug.log"
    log = DebugLog(True, path)
    log.debug("d-message")
    log.info("i-message")
    log.error("e-message")
    log.close()

    lines = path.read_text().splitlines()
    assert "INFO: Logger initialized" in lines[0]
    assert "DEBUG: d-message" in lines[1]
    assert "INFO: i-message" in lines[2]
    assert "ERROR: e-message" in lines[3]


def test_appends_to_existing_file(tmp_path):
    path = tmp_path / "provider-debug.log"
    path.write_text("previous run\n")
    log = DebugLog(True, path)
    log.info("next run")
    log.close()
    assert path.read_text().startswith("previous run\n")


def test_writes_after_close_are_dropped(tmp_path):
    path = tmp_path / "provider-debug.log"
    log = DebugLog(True, path)
    log.info("before")
    log.close()
    log.close()
    log.info("after")
    assert "after" not in path.read_text()
    assert log.is_open is False


def test_concurrent_writes_do_not_interleave(tmp_path):
    path = tmp_path / "provider-debug.log"
    log = DebugLog(True, path)

    def worker(n):
        for i in range(50):
            log.debug(f"worker-{n}-line-{i}-" + "x" * 200)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    log.close()

    lines = path.read_text().splitlines()
    body = [line for line in lines if "worker-" in line]
    assert len(body) == 8 * 50
    assert all(line.endswith("x" * 200) for line in body)


def test_token_fingerprint_is_short_and_stable():
    assert token_fingerprint("abc") == token_fingerprint("abc")
    assert len(token_fingerprint("abc")) == 12
    assert "abc" not in token_fingerprint("abc")
