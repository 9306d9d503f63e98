from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration with environment variable support"""

    # Database
    database_url: str = "sqlite:///./pedigree_processor.db"

    # App
    app_name: str = "Pedigree Processor"
    debug: bool = False
    log_level: str = "INFO"

    # Pedigree JSON schema version the converter was written against
    expected_pedigree_version: str = "1.0"

    # Vocabulary Configuration
    # If vocabulary_base_url is set, terms are fetched from
    # {vocabulary_base_url}/{vocabulary}/{term_id}; otherwise the terms
    # files are used (empty vocabulary when neither is set)
    vocabulary_base_url: str = ""  # e.g. 'https://phenotips.example.org/rest/vocabularies'
    vocabulary_timeout: float = 10.0
    omim_terms_file: str = ""
    hpo_terms_file: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
