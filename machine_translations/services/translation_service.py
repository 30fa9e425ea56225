from machine_translations.core.config import settings
from machine_translations.core.exceptions import ConfigurationError, TranslationError
from abc import ABC, abstractmethod
from typing import Optional
import requests
import logging

logger = logging.getLogger(__name__)

DEEPL_FREE_API_URL = "https://api-free.deepl.com/v2/translate"
DEEPL_PRO_API_URL = "https://api.deepl.com/v2/translate"


class Translator(ABC):
    """Translates a single text from one language into another."""

    @abstractmethod
    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate text.

        Raises:
            TranslationError: If the text could not be translated
        """
        ...


class DeeplTranslator(Translator):
    """Translator backed by the DeepL REST API."""

    # DeepL rejects some bare target codes and wants a regional variant
    TARGET_LANGUAGE_MAPPING = {
        'en': 'EN-US',
        'pt': 'PT-PT',
    }

    def __init__(self, api_key: Optional[str] = None, api_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize the translator.

        Args:
            api_key: DeepL authentication key. Defaults to DEEPL_API_KEY from settings.
            api_url: Endpoint override. Keys ending in ':fx' use the free endpoint.
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or settings.deepl_api_key
        if not self.api_key:
            raise ConfigurationError("DeepL API key not configured (set DEEPL_API_KEY)")

        self.api_url = api_url or settings.deepl_api_url or self._default_api_url(self.api_key)
        self.timeout = timeout or settings.deepl_timeout
        self.session = requests.Session()
        self.session.headers.update({'Authorization': f"DeepL-Auth-Key {self.api_key}"})

        logger.info(f"DeeplTranslator initialized. Endpoint: {self.api_url}")

    @staticmethod
    def _default_api_url(api_key: str) -> str:
        return DEEPL_FREE_API_URL if api_key.endswith(":fx") else DEEPL_PRO_API_URL

    def _map_source_code(self, lang_code: str) -> str:
        return lang_code.upper()

    def _map_target_code(self, lang_code: str) -> str:
        return self.TARGET_LANGUAGE_MAPPING.get(lang_code.lower(), lang_code.upper())

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate text from source language to target language.

        Args:
            text: Text to translate
            source_lang: Source language code (e.g., 'de')
            target_lang: Target language code (e.g., 'cs')

        Returns:
            Translated text

        Raises:
            TranslationError: On transport failure, non-2xx status or an
                unexpected response payload
        """
        data = {
            'text': text,
            'source_lang': self._map_source_code(source_lang),
            'target_lang': self._map_target_code(target_lang),
        }

        logger.debug(f"Translation request: '{text}' from '{data['source_lang']}' to '{data['target_lang']}'")

        try:
            response = self.session.post(self.api_url, data=data, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            error_msg = f"DeepL request failed: {e}"
            if getattr(e, 'response', None) is not None:
                error_msg += f" - {e.response.text[:200]}"
            raise TranslationError(error_msg) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise TranslationError(f"DeepL returned a non-JSON response: {response.text[:200]}") from e

        try:
            return payload['translations'][0]['text']
        except (KeyError, IndexError, TypeError) as e:
            raise TranslationError(f"Unexpected DeepL response format: {payload}") from e
