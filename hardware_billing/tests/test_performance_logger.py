import pytest

from hardware_billing import performance_logger
from hardware_billing.performance_logger import get_function_stats, profile_function, reset_stats

pytestmark = pytest.mark.skipif(
    not performance_logger.ENABLE_PROFILING, reason='profiling disabled'
)


def test_profiled_function_counts_calls():
    reset_stats()

    @profile_function(name='Prueba')
    def work(x):
        return x * 2

    assert work(2) == 4
    assert work(3) == 6
    stats = get_function_stats()['Prueba']
    assert stats['calls'] == 2
    assert stats['max_time'] >= 0


def test_errors_are_counted_and_propagated():
    reset_stats()

    @profile_function
    def broken():
        raise ValueError('boom')

    with pytest.raises(ValueError):
        broken()
    assert get_function_stats()['broken']['calls'] == 1


def test_route_timing_is_written(client, monkeypatch, tmp_path):
    log_file = tmp_path / 'performance.log'
    monkeypatch.setattr(performance_logger, 'PERFORMANCE_LOG', str(log_file))
    monkeypatch.setattr(performance_logger, 'LOGS_DIR', str(tmp_path))

    client.get('/api/items')

    text = log_file.read_text(encoding='utf-8')
    assert '| GET /api/items | Listar items' in text
    assert ' | 200 | ' in text
