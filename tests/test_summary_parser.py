import unittest

from summary_parser import ParsedCourse, parse_passed_courses, parse_summary_line


class TestParseSummaryLine(unittest.TestCase):
    def test_basic_dash_bullet(self) -> None:
        course = parse_summary_line("- SUBJ 101: A")

        self.assertIsNotNone(course)
        assert course is not None
        self.assertEqual(course.subject, "SUBJ")
        self.assertEqual(course.number, "101")
        self.assertEqual(course.grade, "A")

    def test_star_bullet_with_indent(self) -> None:
        course = parse_summary_line("    * CHEM 110L: B+")
        self.assertEqual(course, ParsedCourse("CHEM", "110L", "B+"))

    def test_lowercase_subject_is_normalized(self) -> None:
        course = parse_summary_line("- math 101: A-")
        self.assertIsNotNone(course)
        assert course is not None
        self.assertEqual(course.key, ("MATH", "101"))

    def test_percentage_and_numeric_grades(self) -> None:
        self.assertIsNotNone(parse_summary_line("- BIOL 200: 87%"))
        self.assertIsNotNone(parse_summary_line("- BIOL 200: 100"))

    def test_pass_grade(self) -> None:
        self.assertIsNotNone(parse_summary_line("- PE 150: P"))

    def test_markdown_bold_code(self) -> None:
        course = parse_summary_line("* **HIST 201**: C")
        self.assertEqual(course, ParsedCourse("HIST", "201", "C"))

    def test_withdrawal_is_skipped(self) -> None:
        self.assertIsNone(parse_summary_line("- ENGL 2XX: W"))

    def test_lowercase_grade_is_skipped(self) -> None:
        self.assertIsNone(parse_summary_line("- MATH 101: a"))

    def test_four_digit_grade_is_skipped(self) -> None:
        self.assertIsNone(parse_summary_line("- MATH 101: 1000"))

    def test_subject_length_bounds(self) -> None:
        self.assertIsNone(parse_summary_line("- M 101: A"))
        self.assertIsNone(parse_summary_line("- MATHEMA 101: A"))
        self.assertIsNotNone(parse_summary_line("- MATHEM 101: A"))

    def test_number_length_bounds(self) -> None:
        self.assertIsNone(parse_summary_line("- MATH 10: A"))
        self.assertIsNone(parse_summary_line("- MATH 101ABC: A"))
        self.assertIsNotNone(parse_summary_line("- MATH 101AB: A"))

    def test_trailing_punctuation_after_grade(self) -> None:
        self.assertEqual(parse_summary_line("- MATH 101: A."), ParsedCourse("MATH", "101", "A"))
        self.assertEqual(parse_summary_line("- ENGL 110: B+,"), ParsedCourse("ENGL", "110", "B+"))
        self.assertEqual(parse_summary_line("- CHEM 110L: 85%;"), ParsedCourse("CHEM", "110L", "85%"))
        self.assertEqual(parse_summary_line("- HIST 201: C (retake)"), ParsedCourse("HIST", "201", "C"))

    def test_word_grades_are_skipped(self) -> None:
        self.assertIsNone(parse_summary_line("- MATH 101: Pass"))
        self.assertIsNone(parse_summary_line("- MATH 101: Distinction"))
        self.assertIsNone(parse_summary_line("- MATH 101: W."))

    def test_missing_bullet_is_skipped(self) -> None:
        self.assertIsNone(parse_summary_line("MATH 101: A"))


class TestParsePassedCourses(unittest.TestCase):
    SUMMARY = (
        "- MATH 101: A+\n"
        "- ENGL 2XX: W\n"
        "- CHEM 110L: B\n"
        "\n"
        "Student performed well overall."
    )

    def test_keeps_order_and_drops_prose(self) -> None:
        courses = parse_passed_courses(self.SUMMARY)
        self.assertEqual([c.code for c in courses], ["MATH 101", "CHEM 110L"])

    def test_punctuated_list_keeps_every_course(self) -> None:
        summary = "- MATH 101: A.\n- ENGL 110: B+,\n- CHEM 110L: 85%;\n- HIST 201: C (retake)"
        courses = parse_passed_courses(summary)
        self.assertEqual(
            [c.code for c in courses],
            ["MATH 101", "ENGL 110", "CHEM 110L", "HIST 201"],
        )

    def test_empty_input(self) -> None:
        self.assertEqual(parse_passed_courses(""), [])
        self.assertEqual(parse_passed_courses(None), [])

    def test_duplicates_pass_through(self) -> None:
        courses = parse_passed_courses("- MATH 101: C\n- MATH 101: A")
        self.assertEqual(len(courses), 2)

    def test_parsing_is_idempotent(self) -> None:
        self.assertEqual(parse_passed_courses(self.SUMMARY), parse_passed_courses(self.SUMMARY))


if __name__ == "__main__":
    unittest.main()
