from pathlib import Path

from loguru import logger

from clusternet.observability.logging import LogConfig, setup_logging, teardown_logging


class TestSetupLogging:
    def test_file_handler_receives_context(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "clusternet.log"
        ids = setup_logging(LogConfig(console=False, file=str(log_file)))
        try:
            from clusternet.providers.aws import lifecycle

            lifecycle.log.bind(cluster="demo").info("hello {who}", who="world")
        finally:
            teardown_logging(ids)

        content = log_file.read_text()
        assert "hello world" in content
        assert "aws-lifecycle[demo] hello world" in content

    def test_console_only_returns_one_handler(self):
        ids = setup_logging(LogConfig(console=True))
        try:
            assert len(ids) == 1
        finally:
            teardown_logging(ids)

    def test_no_handlers(self):
        ids = setup_logging(LogConfig(console=False))
        teardown_logging(ids)
        assert ids == []

    def test_teardown_disables_library_logging(self, tmp_path: Path):
        log_file = tmp_path / "out.log"
        ids = setup_logging(LogConfig(console=False, file=str(log_file)))
        teardown_logging(ids)

        sink: list[str] = []
        hid = logger.add(sink.append, filter="clusternet")
        try:
            from clusternet.providers.aws import lifecycle

            lifecycle.log.info("should not appear")
        finally:
            logger.remove(hid)
        assert sink == []

    def test_file_level_filters_debug(self, tmp_path: Path):
        log_file = tmp_path / "info.log"
        ids = setup_logging(LogConfig(console=False, file=str(log_file), file_level="INFO"))
        try:
            from clusternet.providers.aws import lifecycle

            lifecycle.log.debug("quiet")
            lifecycle.log.info("loud")
        finally:
            teardown_logging(ids)

        content = log_file.read_text()
        assert "loud" in content
        assert "quiet" not in content
