from texcorrect.core.classifier import (
    ClassifierState,
    CorrectableChunk,
    EnvironmentStack,
    LineClass,
    Preserved,
    classify_line,
    environment_name,
    segment_lines,
    step,
)


def test_comment_and_command_lines_are_preserved():
    empty = EnvironmentStack()
    assert classify_line(empty, "% a comment")[1] is LineClass.PRESERVED
    assert classify_line(empty, "\\section{Intro}")[1] is LineClass.PRESERVED
    assert classify_line(empty, "Plain prose.")[1] is LineClass.FREE_TEXT
    assert classify_line(empty, "")[1] is LineClass.FREE_TEXT


def test_indented_markup_is_free_text():
    # Only the first character decides
    assert classify_line(EnvironmentStack(), "  \\emph{x}")[1] is LineClass.FREE_TEXT


def test_environment_name_uses_first_brace_pair():
    assert environment_name("\\begin{equation}") == "equation"
    assert environment_name("\\begin{tabular}{ll}") == "tabular"
    assert environment_name("\\end{itemize} trailing") == "itemize"
    assert environment_name("\\begin{open") == "open"


def test_lines_inside_environment_are_preserved_regardless_of_content():
    stack, kind = classify_line(EnvironmentStack(), "\\begin{proof}")
    assert stack.names == ("proof",)
    assert kind is LineClass.PRESERVED

    stack, kind = classify_line(stack, "Plain prose inside the proof.")
    assert kind is LineClass.PRESERVED

    stack, kind = classify_line(stack, "\\end{proof}")
    assert stack.names == ()
    assert kind is LineClass.PRESERVED


def test_duplicate_names_remove_first_entry_from_bottom():
    stack = EnvironmentStack()
    for line in ["\\begin{a}", "\\begin{b}", "\\begin{a}"]:
        stack, _ = classify_line(stack, line)
    assert stack.names == ("a", "b", "a")

    stack, _ = classify_line(stack, "\\end{a}")
    assert stack.names == ("b", "a")
    assert classify_line(stack, "still nested")[1] is LineClass.PRESERVED


def test_adversarial_nesting_on_one_line_pushes_single_name():
    stack, kind = classify_line(EnvironmentStack(), "\\begin{a}\\begin{a}\\end{a}")
    assert stack.names == ("a",)
    assert kind is LineClass.PRESERVED
    assert classify_line(stack, "text after")[1] is LineClass.PRESERVED


def test_unmatched_end_is_a_no_op():
    stack, kind = classify_line(EnvironmentStack(), "\\end{figure}")
    assert stack.names == ()
    assert kind is LineClass.PRESERVED
    assert classify_line(stack, "Prose.")[1] is LineClass.FREE_TEXT


def test_step_is_pure():
    state = ClassifierState()
    next_state, released = step(state, "Some prose.")
    assert state.pending == ()
    assert next_state.pending == ("Some prose.",)
    assert released == []


def test_segment_lines_flushes_chunk_before_preserved_line():
    lines = ["First line.", "Second line.", "% note", "Third line.", "\\newpage"]
    assert segment_lines(lines) == [
        CorrectableChunk("First line.\nSecond line.\n"),
        Preserved("% note"),
        CorrectableChunk("Third line.\n"),
        Preserved("\\newpage"),
    ]


def test_environment_block_then_prose():
    lines = ["\\begin{equation}", "x=1", "\\end{equation}", "Fix this sentence."]
    assert segment_lines(lines) == [
        Preserved("\\begin{equation}"),
        Preserved("x=1"),
        Preserved("\\end{equation}"),
        CorrectableChunk("Fix this sentence.\n"),
    ]


def test_trailing_text_dropped_when_not_flushed():
    lines = ["\\section{A}", "Dangling prose."]
    assert segment_lines(lines, flush_trailing=False) == [Preserved("\\section{A}")]


def test_unclosed_environment_preserves_rest_of_region():
    lines = ["\\begin{itemize}", "item text", "more text"]
    segments = segment_lines(lines)
    assert all(isinstance(s, Preserved) for s in segments)
    assert len(segments) == 3


def test_blank_lines_join_the_chunk():
    assert segment_lines(["Para one.", "", "Para two."]) == [
        CorrectableChunk("Para one.\n\nPara two.\n"),
    ]


def test_resolve_keeps_source_text():
    chunk = CorrectableChunk("a\n").resolve("A")
    assert chunk.text == "a\n"
    assert chunk.corrected == "A"
