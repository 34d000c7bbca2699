from apps.persona.tools.response_validator import strip_reasoning


def test_removes_multiline_block():
    text = "<think>\nthey asked about dinner\nkeep it short\n</think>omw, order for me"
    assert strip_reasoning(text) == "omw, order for me"


def test_case_insensitive_tags():
    assert strip_reasoning("<THINK>plan</Think>hii") == "hii"


def test_non_greedy_keeps_text_between_blocks():
    text = "a<think>x</think> b <think>y</think>c"
    assert strip_reasoning(text) == "a b c"


def test_text_without_blocks_is_untouched():
    text = "  hey!!  \nsee u soon "
    assert strip_reasoning(text) == text


def test_empty_response():
    assert strip_reasoning("") == ""
