from guideline_qa.core.scoring import DIRECT_MATCH_SCORE, rank_lines, rank_scored, score_line


def test_scenario_vacation_question(corpus):
    assert score_line("휴가 승인 절차", corpus[0]) == 2
    assert score_line("휴가 승인 절차", corpus[1]) == 0
    assert rank_lines("휴가 승인 절차", corpus) == [corpus[0]]


def test_direct_match_scores_three():
    assert score_line("출장비", "출장비는 사전 결재 필요") == DIRECT_MATCH_SCORE
    assert score_line("VPN", "Use the vpn client") == DIRECT_MATCH_SCORE


def test_direct_match_ignores_whitespace_differences():
    assert score_line("사전결재", "출장비는 사전 결재 필요") == DIRECT_MATCH_SCORE
    assert score_line("사전   결재", "출장비는 사전 결재 필요") == DIRECT_MATCH_SCORE


def test_short_question_needs_one_shared_token():
    assert score_line("alpha bravo charlie delta", "alpha zulu") == 1


def test_long_question_needs_two_shared_tokens():
    question = "alpha bravo charlie delta echo"
    assert score_line(question, "alpha zulu") == 0
    assert score_line(question, "alpha bravo zulu") == 2


def test_overlap_accepts_substring_in_either_direction():
    assert score_line("payments policy", "the payment rule") == 1
    assert score_line("pay rules", "payroll schedule") == 1


def test_question_without_tokens_scores_zero():
    assert score_line("!!!", "anything at all") == 0
    assert score_line("a", "b c d") == 0


def test_rank_orders_by_score_descending():
    lines = ["휴가 신청", "휴가 승인 절차 안내", "출장"]
    ranked = rank_scored("휴가 승인 절차 문의", lines)
    assert [s.line for s in ranked] == ["휴가 승인 절차 안내", "휴가 신청"]
    assert [s.score for s in ranked] == [3, 1]


def test_rank_is_stable_on_ties():
    lines = ["휴가 규정 A", "휴가 규정 B", "휴가 규정 C"]
    assert rank_lines("휴가", lines) == lines
    assert rank_lines("휴가", list(reversed(lines))) == list(reversed(lines))


def test_line_score_does_not_depend_on_corpus_order(corpus):
    lines = corpus + ["휴가 신청은 3일 전", "승인 절차 안내"]
    forward = {s.line: s.score for s in rank_scored("휴가 승인 절차", lines)}
    backward = {s.line: s.score for s in rank_scored("휴가 승인 절차", list(reversed(lines)))}
    assert forward == backward


def test_rank_does_not_mutate_corpus(corpus):
    snapshot = list(corpus)
    rank_lines("휴가 승인 절차", corpus)
    assert corpus == snapshot
