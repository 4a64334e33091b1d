"""User-facing cart messages"""

from typing import Any

SUPPORTED_LANGUAGES = {
    "pt": "Português",
    "en": "English",
}

DEFAULT_LANGUAGE = "pt"

_TRANSLATIONS: dict[str, dict[str, Any]] = {
    "pt": {
        "cart": {
            "out_of_stock": "Quantidade solicitada fora de estoque",
            "add_error": "Erro na adição do produto",
            "remove_error": "Erro na remoção do produto",
            "update_error": "Erro na alteração de quantidade do produto",
        },
    },
    "en": {
        "cart": {
            "out_of_stock": "Requested amount is out of stock",
            "add_error": "Failed to add the product",
            "remove_error": "Failed to remove the product",
            "update_error": "Failed to change the product amount",
        },
    },
}


def detect_language(language_code: str | None) -> str:
    """Normalize a language code ("pt-BR" -> "pt"), falling back to the default."""
    if not language_code:
        return DEFAULT_LANGUAGE
    lang = language_code.split("-")[0].split("_")[0].lower()
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def _lookup(translations: dict[str, Any], key: str) -> Any:
    current: Any = translations
    try:
        for part in key.split("."):
            current = current[part]
    except (KeyError, TypeError):
        return None
    return current


def get_text(key: str, lang: str = DEFAULT_LANGUAGE, default: str | None = None, **kwargs) -> str:
    """
    Get translated text by key.

    Args:
        key: Translation key with dot notation (e.g., "cart.out_of_stock")
        lang: Language code (e.g., "pt", "en-US")
        default: Value returned if the key is missing in every language
        **kwargs: Variables to format into the string

    Returns:
        Translated string, or default/key if not found
    """
    lang = detect_language(lang)

    text = _lookup(_TRANSLATIONS[lang], key)
    if text is None and lang != DEFAULT_LANGUAGE:
        text = _lookup(_TRANSLATIONS[DEFAULT_LANGUAGE], key)

    if not isinstance(text, str):
        return default if default is not None else key

    if kwargs:
        try:
            return text.format(**kwargs)
        except (KeyError, ValueError, AttributeError):
            return text

    return text
