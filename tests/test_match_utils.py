import pytest

from after8.utils.match_utils import (
    DEFAULT_BANDS,
    answers_match,
    average_score,
    band_for,
    build_answer_set,
    group_by_band,
    pair_score,
)


def opt(option_id):
    return {'optionId': option_id, 'scaledValue': None}


def scaled(value):
    return {'optionId': None, 'scaledValue': value}


U1 = {'q1': opt('optA'), 'q2': scaled(3)}
U2 = {'q1': opt('optA'), 'q2': scaled(5)}
U3 = {'q1': opt('optB')}


def test_identical_answer_sets_score_100():
    answers = {'q1': opt('a'), 'q2': scaled(2.5), 'q3': opt('c')}
    assert pair_score(answers, dict(answers)) == 100


def test_empty_answer_set_scores_zero():
    assert pair_score({}, U1) == 0
    assert pair_score({}, {}) == 0


def test_worked_example():
    assert pair_score(U1, U2) == 50
    assert pair_score(U1, U3) == 0
    answer_map = {'u1': U1, 'u2': U2, 'u3': U3}
    assert average_score('u1', answer_map) == 25
    assert band_for(average_score('u1', answer_map)) == 'below-50'


def test_denominator_is_larger_answer_set():
    a = {'q1': opt('x')}
    b = {'q1': opt('x'), 'q2': opt('y'), 'q3': opt('z'), 'q4': scaled(1)}
    # A walks only its own question; B's extra answers enlarge the denominator.
    assert pair_score(a, b) == 25
    assert pair_score(b, a) == 25


def test_each_direction_walks_its_own_questions():
    a = {'q1': opt('x'), 'q2': opt('y')}
    b = {'q1': opt('x'), 'q3': opt('z'), 'q4': opt('w')}
    # Different keys are walked in each direction; only q1 is shared.
    assert pair_score(a, b) == pytest.approx(100 / 3)
    assert pair_score(b, a) == pytest.approx(100 / 3)


def test_missing_answer_in_partner_is_not_a_match():
    assert answers_match(opt('a'), None) is False


def test_empty_option_id_never_matches():
    assert answers_match(opt(''), opt('')) is False


def test_scaled_values_must_both_be_present_and_equal():
    assert answers_match(scaled(4), scaled(4)) is True
    assert answers_match(scaled(4), scaled(4.0)) is True
    assert answers_match(scaled(4), scaled(4.5)) is False
    assert answers_match(scaled(0), scaled(0)) is True
    assert answers_match(scaled(None), scaled(None)) is False


def test_option_or_scaled_is_enough():
    a = {'optionId': 'a', 'scaledValue': 1}
    b = {'optionId': 'b', 'scaledValue': 1}
    assert answers_match(a, b) is True


@pytest.mark.parametrize('score,label', [
    (100, '90-100'),
    (90, '90-100'),
    (89.99, '80-90'),
    (80, '80-90'),
    (70, '70-80'),
    (60, '60-70'),
    (50, '50-60'),
    (49.99, 'below-50'),
    (0, 'below-50'),
])
def test_band_boundaries_go_to_upper_band(score, label):
    assert band_for(score) == label


def test_single_participant_scores_zero():
    groups = group_by_band([{'userId': 'solo', 'name': 'Solo'}], {'solo': U1})
    assert groups['below-50'] == [{'userId': 'solo', 'name': 'Solo', 'avgScore': 0.0}]


def test_group_by_band_returns_every_band_in_participant_order():
    participants = [
        {'userId': 'u3', 'name': 'Cleo'},
        {'userId': 'u1', 'name': 'Ana'},
        {'userId': 'u2', 'name': None},
    ]
    groups = group_by_band(participants, {'u1': U1, 'u2': U2, 'u3': U3})

    assert list(groups) == [label for label, _ in DEFAULT_BANDS]
    assert [u['userId'] for u in groups['below-50']] == ['u3', 'u1', 'u2']
    assert groups['below-50'][2]['name'] == 'Unnamed User'
    for users in groups.values():
        for user in users:
            assert 0 <= user['avgScore'] <= 100


def test_every_user_lands_in_exactly_one_band():
    answer_map = {
        'a': {'q1': opt('x'), 'q2': opt('y')},
        'b': {'q1': opt('x'), 'q2': opt('y')},
        'c': {'q1': opt('x'), 'q2': opt('n')},
        'd': {},
    }
    participants = [{'userId': uid, 'name': uid} for uid in answer_map]
    groups = group_by_band(participants, answer_map)

    placed = [u['userId'] for users in groups.values() for u in users]
    assert sorted(placed) == sorted(answer_map)


def test_grouping_is_idempotent():
    participants = [{'userId': 'u1', 'name': 'A'}, {'userId': 'u2', 'name': 'B'}]
    answer_map = {'u1': U1, 'u2': U2}
    assert group_by_band(participants, answer_map) == group_by_band(participants, answer_map)


def test_build_answer_set_indexes_by_question():
    answer_set = build_answer_set([
        {'questionId': 'q1', 'optionId': 'a', 'scaledValue': None},
        {'questionId': 'q2', 'optionId': None, 'scaledValue': 7},
    ])
    assert answer_set == {'q1': opt('a'), 'q2': scaled(7)}
