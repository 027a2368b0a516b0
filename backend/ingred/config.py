from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "ingred-safety"
    env: str = "local"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./ingred.db"

    # Safety badge tiers: good >= good threshold, caution >= caution threshold, else poor.
    score_good_threshold: int = 90
    score_caution_threshold: int = 70

    # False: synonyms match as plain substrings. True: whole words, simple plurals allowed.
    lexicon_word_boundaries: bool = False

    # Name shown for the implicit member when a household has no family members.
    primary_member_name: str = "Primary user"

    # ThreadPoolExecutor workers for batch (weekly) assessment.
    batch_max_workers: int = 4

    class Config:
        env_file = ".env"


settings = Settings()
