"""
Configuration for RecipeScan API.
Loads settings from environment variables.
"""
from typing import List

from pydantic_settings import BaseSettings


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # API Configuration
    API_TITLE: str = "RecipeScan API"
    API_VERSION: str = "0.1.0"

    # CORS Configuration
    # Comma-separated list of allowed origins
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"

    # OCR Configuration
    OCR_LANG: str = "tr"
    OCR_FALLBACK_LANG: str = "en"
    OCR_USE_GPU: bool = False
    OCR_TIMEOUT_SECONDS: int = 90
    IMAGE_MAX_DIMENSION: int = 2048

    # Document (PDF text layer) Configuration
    MAX_PDF_PAGES: int = 20
    MIN_PAGE_TEXT_CHARS: int = 50

    # Draft defaults
    PLACEHOLDER_TITLE: str = "Taranan Tarif"
    DEFAULT_CATEGORY: str = "Genel"

    # Parser vocabulary (diacritic-normalized, comma-separated)
    INGREDIENT_KEYWORDS: str = "malzeme,icindekiler,listesi,gerekli,ihtiyac,bilesenler"
    STEP_KEYWORDS: str = (
        "yapilisi,hazirlanisi,tarif,yapim,nasil,hazirlama,adimlar,pisirme,uygulama,yontem"
    )
    UNIT_WORDS: str = (
        "gr,g,kg,ml,cl,l,lt,kasik,bardak,fincan,adet,tane,kase,tutam,demet,"
        "dilim,paket,cay,su,yemek,tatli,kutu,kavanoz,dis"
    )
    MODIFIER_WORDS: str = "orta,boy,buyuk,kucuk,yarim,ceyrek,tam"
    NUMBER_WORDS: str = "bir,iki,uc,dort,bes,alti,yedi,sekiz,dokuz,on"
    PREPARATION_WORDS: str = (
        "rende,dogranmis,kiyilmis,ezilmis,haslanmis,rendelenmis,soyulmus,eritilmis,kizarmis"
    )

    class Config:
        # Load from .env file if it exists
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        return _split_csv(self.ALLOWED_ORIGINS)

    @property
    def ingredient_keywords(self) -> List[str]:
        return _split_csv(self.INGREDIENT_KEYWORDS)

    @property
    def step_keywords(self) -> List[str]:
        return _split_csv(self.STEP_KEYWORDS)

    @property
    def unit_words(self) -> List[str]:
        return _split_csv(self.UNIT_WORDS)

    @property
    def modifier_words(self) -> List[str]:
        return _split_csv(self.MODIFIER_WORDS)

    @property
    def number_words(self) -> List[str]:
        return _split_csv(self.NUMBER_WORDS)

    @property
    def preparation_words(self) -> List[str]:
        return _split_csv(self.PREPARATION_WORDS)


# Load settings (will use environment variables or .env file)
settings = Settings()
