class Translator:
    """Message catalog for user-facing analytics text."""

    DEFAULT_LANGUAGE = "ru"

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        self.language = language
        self.translations = {
            "ru": {
                "bmi_low": "⚠️ Ваш BMI ниже нормы. Рекомендуется увеличить калорийность питания и сосредоточиться на наборе мышечной массы.",
                "bmi_high": "⚠️ Ваш BMI выше нормы. Рекомендуется добавить кардио и контролировать калорийность питания.",
                "muscle_balance": "💪 Уделите больше внимания группе мышц: {group} (всего {percentage:.1f}% от общего объема)",
                "frequency": "📅 Рекомендуется увеличить частоту тренировок до 3-4 раз в неделю для лучших результатов.",
                "diversity": "🎯 Добавьте больше разнообразия в программу. Рекомендуется выполнять 8-12 различных упражнений.",
                "goal_strength": "💪 Для развития силы фокусируйтесь на весах 85-95% от 1ПМ с 1-5 повторениями.",
                "goal_mass": "🏋️ Для роста массы оптимальны веса 70-85% от 1ПМ с 6-12 повторениями.",
                "goal_endurance": "🏃 Для развития выносливости используйте веса 50-70% от 1ПМ с 15-20+ повторениями.",
                "goal_weight_loss": "🔥 Для похудения сочетайте силовые тренировки с кардио и контролируйте калорийность.",
                "great_job": "✅ Отличная работа! Продолжайте в том же духе.",
                "week_label": "Неделя {week}",
            },
            "en": {
                "bmi_low": "⚠️ Your BMI is below normal. Increase your calorie intake and focus on building muscle mass.",
                "bmi_high": "⚠️ Your BMI is above normal. Add cardio and keep your calorie intake under control.",
                "muscle_balance": "💪 Pay more attention to the muscle group: {group} (only {percentage:.1f}% of total volume)",
                "frequency": "📅 Train 3-4 times a week for better results.",
                "diversity": "🎯 Add more variety to your program. 8-12 different exercises are recommended.",
                "goal_strength": "💪 For strength, focus on 85-95% of your 1RM for 1-5 reps.",
                "goal_mass": "🏋️ For muscle mass, 70-85% of your 1RM for 6-12 reps works best.",
                "goal_endurance": "🏃 For endurance, use 50-70% of your 1RM for 15-20+ reps.",
                "goal_weight_loss": "🔥 For weight loss, combine strength training with cardio and watch your calories.",
                "great_job": "✅ Great work! Keep it up.",
                "week_label": "Week {week}",
            },
        }

    @property
    def languages(self) -> list[str]:
        return sorted(self.translations)

    def gettext(self, key: str, language: str | None = None, **params) -> str:
        """Return the message for ``key`` formatted with ``params``.

        Unknown languages fall back to Russian, unknown keys to the key itself.
        """
        lang = language or self.language
        catalog = self.translations.get(lang) or self.translations[self.DEFAULT_LANGUAGE]
        text = catalog.get(key, key)
        return text.format(**params) if params else text


translator = Translator()
