from dataclasses import replace

import pytest

from config import BatchConfig, DecompositionConfig
from core.errors import InvalidInput
from runners.batch_runner import BatchDecomposer, decompose_shape, describe_error, run_batch

from conftest import SQUARE, L_SHAPE, COMB


def quiet_config(n_workers=None):
    return replace(
        DecompositionConfig(),
        batch=BatchConfig(n_workers=n_workers, verbose=False, progress_bar=False),
    )


SHAPES = {
    'square': SQUARE,
    'L': L_SHAPE,
    'bow_tie': [(0, 0), (4, 4), (4, 0), (0, 2)],
    'comb': COMB,
}


class TestDecomposeShape:

    def test_success(self):
        outcome = decompose_shape(('L', L_SHAPE, quiet_config()))
        assert outcome.ok
        assert outcome.name == 'L'
        assert outcome.result.n_pieces == 2

    def test_failure_is_captured(self):
        outcome = decompose_shape(('pair', [(0, 0), (1, 0)], quiet_config()))
        assert not outcome.ok
        assert isinstance(outcome.error, InvalidInput)
        assert describe_error(outcome).startswith('pair: InvalidInput at vertices [0, 1]')


class TestBatchDecomposer:

    def test_in_process_run(self):
        runner = BatchDecomposer(quiet_config())
        outcomes = runner.run(SHAPES)

        assert list(outcomes) == list(SHAPES)
        assert list(runner.failures) == ['bow_tie']
        assert set(runner.results) == {'square', 'L', 'comb'}

    def test_summary(self):
        runner = BatchDecomposer(quiet_config())
        runner.run(SHAPES)
        summary = runner.get_summary()

        assert summary['n_shapes'] == 4
        assert summary['n_ok'] == 3
        assert summary['n_failed'] == 1
        assert summary['total_triangles'] == 2 + 4 + 12
        assert 3.0 <= summary['avg_piece_vertices'] <= 8.0

    def test_empty_summary(self):
        assert BatchDecomposer(quiet_config()).get_summary() == {}

    def test_list_input(self):
        outcomes = BatchDecomposer(quiet_config()).run([SQUARE, L_SHAPE])
        assert list(outcomes) == ['0', '1']

    @pytest.mark.parametrize("requested, expected", [(None, 1), (1, 1), (3, 3)])
    def test_worker_count(self, requested, expected):
        assert BatchDecomposer(quiet_config(requested)).n_workers == expected

    def test_all_cpus(self):
        assert BatchDecomposer(quiet_config(0)).n_workers >= 1

    def test_parallel_matches_serial(self):
        serial = BatchDecomposer(quiet_config()).run(SHAPES)
        parallel = BatchDecomposer(quiet_config(2)).run(SHAPES)

        assert list(parallel) == list(serial)
        for name in SHAPES:
            assert parallel[name].ok == serial[name].ok
            if serial[name].ok:
                assert parallel[name].result.polygons == serial[name].result.polygons
            else:
                assert parallel[name].error.indices == serial[name].error.indices

    def test_verbose_output(self, capsys):
        config = replace(
            DecompositionConfig(),
            batch=BatchConfig(verbose=True, progress_bar=False),
        )
        BatchDecomposer(config).run(SHAPES)
        out = capsys.readouterr().out
        assert 'CONVEX DECOMPOSITION' in out
        assert 'bow_tie: InvalidInput' in out


def test_run_batch():
    outcomes = run_batch({'square': SQUARE}, verbose=False)
    assert outcomes['square'].result.n_pieces == 1
