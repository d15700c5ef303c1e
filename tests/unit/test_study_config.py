from study_planner.config import FALLBACK_HEX, AppSettings, CourseColor, StudyConfig


class TestCourseColor:
    def test_palette_has_ten_unique_keys(self):
        keys = CourseColor.all_keys()
        assert len(keys) == 10
        assert len(set(keys)) == 10

    def test_hex_for_known_key(self):
        assert CourseColor.hex_for("indigo") == CourseColor.INDIGO.hex_value

    def test_hex_for_unknown_key_falls_back(self):
        assert CourseColor.hex_for("chartreuse") == FALLBACK_HEX
        assert CourseColor.hex_for(None) == FALLBACK_HEX
        assert CourseColor.hex_for("") == FALLBACK_HEX

    def test_from_key(self):
        assert CourseColor.from_key("red") is CourseColor.RED
        assert CourseColor.from_key("Red") is None


class TestStudyConfig:
    def test_points_policy_is_asymmetric(self):
        assert StudyConfig.POINTS_CORRECT == 5
        assert StudyConfig.POINTS_INCORRECT == -2

    def test_question_count_bounds_contain_default(self):
        assert (
            StudyConfig.MIN_QUESTION_COUNT
            <= StudyConfig.DEFAULT_QUESTION_COUNT
            <= StudyConfig.MAX_QUESTION_COUNT
        )

    def test_month_grid_is_six_weeks(self):
        assert StudyConfig.MONTH_GRID_DAYS == 6 * StudyConfig.WEEK_DAYS


class TestAppSettings:
    def test_defaults_without_env(self, monkeypatch):
        for var in (
            "STUDY_PLANNER_DB",
            "STUDY_PLANNER_QUESTION_BANK",
            "STUDY_PLANNER_SEED",
            "STUDY_PLANNER_USER",
        ):
            monkeypatch.delenv(var, raising=False)
        assert AppSettings.from_env() == AppSettings()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("STUDY_PLANNER_DB", ":memory:")
        monkeypatch.setenv("STUDY_PLANNER_USER", "ada")

        settings = AppSettings.from_env()

        assert settings.db_path == ":memory:"
        assert settings.user_id == "ada"
        assert settings.question_bank_path == AppSettings().question_bank_path
