import logging

from shelfspace.optimization.shelf_optimizer import optimize_shelf_space
from shelfspace.utils import logger as logger_module
from shelfspace.utils.logger import ShelfLogger, get_logger
from shelfspace.utils.monitor import PerformanceMonitor, monitor

def file_handlers(log):
    return [h for h in log.handlers if isinstance(h, logging.FileHandler)]

def test_library_logging_writes_no_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SHELFSPACE_LOG_DIR", raising=False)
    monkeypatch.setattr(logger_module, "_logger_instance", None)

    log = get_logger()
    log.info("console only")

    assert file_handlers(log) == []
    assert list(tmp_path.iterdir()) == []

def test_log_directory_enables_daily_file(tmp_path):
    shelf_logger = ShelfLogger(log_dir=str(tmp_path / "logs"))
    try:
        shelf_logger.get_logger().info("written to file")
        assert shelf_logger.log_file.parent == tmp_path / "logs"
        assert shelf_logger.log_file.name.startswith("shelfspace_")
        assert len(file_handlers(shelf_logger.get_logger())) == 1
    finally:
        for handler in file_handlers(shelf_logger.get_logger()):
            handler.close()
        ShelfLogger()

def test_timing_history_is_bounded():
    perf = PerformanceMonitor(history_size=3)

    @perf.time_it
    def step(value):
        return value * 2

    assert [step(i) for i in range(10)] == [2 * i for i in range(10)]
    assert len(perf.metrics) == 3
    assert list(perf.get_timings()) == ["test_timing_history_is_bounded.<locals>.step"]

def test_repeated_solves_do_not_grow_the_global_monitor(make_product, single_shelf, config):
    for _ in range(30):
        optimize_shelf_space([make_product("a")], single_shelf(2), config)

    assert len(monitor.metrics) <= monitor.metrics.maxlen
    timings = monitor.get_timings()
    assert "ModelBuilder.build" in timings
    assert "SolverAdapter.solve" in timings
