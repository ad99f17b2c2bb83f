# after8/utils/match_utils.py
"""
Pure Python compatibility scoring for event participants.

Every participant is compared against every other participant of the same
event using their questionnaire answers. Nothing here touches the database;
the matchmaking service loads the answers and hands them in.

An answer set is a dict keyed by question id:
    {"q1": {"optionId": "optA", "scaledValue": None}, ...}
"""

DEFAULT_BANDS = (
    ('90-100', 90),
    ('80-90', 80),
    ('70-80', 70),
    ('60-70', 60),
    ('50-60', 50),
    ('below-50', 0),
)

UNNAMED_USER = "Unnamed User"


def build_answer_set(answers):
    """
    Indexes a list of answer records by question id.

    Args:
        answers (list): dicts with 'questionId', 'optionId', 'scaledValue'

    Returns:
        dict: questionId -> {'optionId': ..., 'scaledValue': ...}
    """
    return {
        a['questionId']: {
            'optionId': a.get('optionId'),
            'scaledValue': a.get('scaledValue'),
        }
        for a in answers
    }


def answers_match(a, b):
    """Same non-empty option, or both scaled values present and exactly equal."""
    if b is None:
        return False
    if a.get('optionId') and a.get('optionId') == b.get('optionId'):
        return True
    scaled_a = a.get('scaledValue')
    scaled_b = b.get('scaledValue')
    return scaled_a is not None and scaled_b is not None and scaled_a == scaled_b


def pair_score(answers_a, answers_b):
    """
    Percentage of A's questions that B answered the same way.

    The denominator is the size of the LARGER answer set, not the overlap, so
    questions B never answered still pull the score down. Only A's questions
    are walked; callers score each direction separately.

    Args:
        answers_a (dict): answer set of the user being scored
        answers_b (dict): answer set of the comparison partner

    Returns:
        float: score in [0, 100]; 0.0 when neither user answered anything
    """
    total_questions = max(len(answers_a), len(answers_b))
    if total_questions == 0:
        return 0.0

    matches = 0
    for question_id, answer in answers_a.items():
        if answers_match(answer, answers_b.get(question_id)):
            matches += 1

    return (matches / total_questions) * 100


def average_score(user_id, answer_map):
    """
    Mean pair score of one user against every other user in answer_map.

    Args:
        user_id: key of the user being scored
        answer_map (dict): user id -> answer set

    Returns:
        float: average in [0, 100]; 0.0 when there is no one to compare with
    """
    answers_a = answer_map.get(user_id)
    if answers_a is None:
        return 0.0

    total_score = 0.0
    compare_count = 0
    for other_id, answers_b in answer_map.items():
        if other_id == user_id:
            continue
        total_score += pair_score(answers_a, answers_b)
        compare_count += 1

    return total_score / compare_count if compare_count > 0 else 0.0


def band_for(score, bands=DEFAULT_BANDS):
    """
    Returns the label of the band a score falls into.

    Bands are ordered from highest to lowest lower bound; the first one the
    score reaches wins, so boundary values go to the upper band.
    """
    for label, lower_bound in bands:
        if score >= lower_bound:
            return label
    # Scores are never negative; the last band is the catch-all.
    return bands[-1][0]


def group_by_band(participants, answer_map, bands=DEFAULT_BANDS):
    """
    Scores every participant and groups them by band.

    Args:
        participants (list): dicts with 'userId' and 'name', in the order
            they should appear inside each band
        answer_map (dict): user id -> answer set
        bands (tuple): (label, lower_bound) pairs, highest first

    Returns:
        dict: band label -> list of {'userId', 'name', 'avgScore'}. All bands
        are present, empty ones included.
    """
    groups = {label: [] for label, _ in bands}

    for participant in participants:
        user_id = participant['userId']
        avg = average_score(user_id, answer_map)
        groups[band_for(avg, bands)].append({
            'userId': user_id,
            'name': participant.get('name') or UNNAMED_USER,
            'avgScore': avg,
        })

    return groups
