import numpy as np
import pytest

from hmmpath.decode import decoder
from hmmpath.model.hmm import ModelDescriptor, build_model


def _fork_model():
    # START splits evenly into X and Y; both emit 'a' and both lead to Z, which emits 'b'.
    return build_model(
        ModelDescriptor(
            state_names=("S", "X", "Y", "Z", "E"),
            alphabet_size=2,
            transitions=(
                ("S", "X", 0.5),
                ("S", "Y", 0.5),
                ("X", "Z", 1.0),
                ("Y", "Z", 1.0),
                ("Z", "E", 1.0),
            ),
            emissions=(("X", "a", 1.0), ("Y", "a", 1.0), ("Z", "b", 1.0)),
        )
    )


def test_equal_predecessor_scores_pick_lowest_index() -> None:
    model = _fork_model()
    trellis = decoder.viterbi_trellis(model, [0, 1])

    assert trellis.sequence_probability[0, 1] == trellis.sequence_probability[0, 2]
    assert trellis.predecessor(1, 3) == 1
    assert trellis.best_path() == [1, 3]


def test_equal_final_scores_pick_lowest_index() -> None:
    model = _fork_model()
    assert decoder.decode_symbols(model, [0]) == [1]


def test_predecessor_is_undefined_at_first_step() -> None:
    trellis = decoder.viterbi_trellis(_fork_model(), [0, 1])
    assert trellis.predecessor(0, 1) is None
    with pytest.raises(IndexError):
        trellis.predecessor(2, 1)


def test_boundary_columns_never_score() -> None:
    model = _fork_model()
    trellis = decoder.viterbi_trellis(model, [0, 1, 1])
    assert not trellis.sequence_probability[:, 0].any()
    assert not trellis.sequence_probability[:, model.nstates - 1].any()


def test_tables_have_expected_shape_and_are_fresh_per_call() -> None:
    model = _fork_model()
    first = decoder.viterbi_trellis(model, [0, 1, 1])
    second = decoder.viterbi_trellis(model, [0, 1, 1])

    assert first.sequence_probability.shape == (3, 5)
    assert first.prev_seq_state.shape == (3, 5)
    assert first.maxtime == 3 and first.nstates == 5
    assert not np.shares_memory(first.sequence_probability, second.sequence_probability)
    assert not np.shares_memory(first.prev_seq_state, second.prev_seq_state)
    with pytest.raises(ValueError):
        first.sequence_probability[0, 0] = 1.0


def test_unexplainable_sequence_still_yields_full_length_path() -> None:
    model = _fork_model()
    # 'b' can never be emitted at the first step
    path = decoder.decode_symbols(model, [1, 1])
    assert len(path) == 2
    assert all(s in model.states.interior() for s in path)
    assert decoder.viterbi_trellis(model, [1, 1]).best_path_probability() == 0.0


def test_candidate_states_cover_interior_only() -> None:
    assert decoder.candidate_states(5) == (1, 4)
    assert decoder.candidate_states(3) == (1, 2)
    assert decoder.candidate_states(2) == (0, 2)


def test_two_state_model_decodes_to_start() -> None:
    model = build_model(ModelDescriptor(state_names=("S", "E"), alphabet_size=1, transitions=(("S", "E", 1.0),)))
    assert decoder.decode_symbols(model, [0, 0]) == [0, 0]
