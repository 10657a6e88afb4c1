"""
Thin Together AI client.

Every call takes the next key from ``TOGETHER_API_KEYS`` so requests are
spread over the pool to stay under per-key rate limits. There is no retry:
a failed call surfaces as ``AssistantError`` and the user is asked to try
again.
"""
import logging
import threading

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

MAX_TOKENS = 4000
TEMPERATURE = 0.7


class AssistantError(Exception):
    """The inference provider could not produce an answer."""


class AssistantNotConfigured(AssistantError):
    def __init__(self):
        super().__init__('AI assistant is not configured')


class KeyRing:
    """Round-robin over a fixed list of API keys, safe to share between threads."""

    def __init__(self, keys):
        self._keys = list(keys)
        self._index = 0
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._keys)

    def next_key(self):
        if not self._keys:
            raise AssistantNotConfigured()
        with self._lock:
            key = self._keys[self._index]
            self._index = (self._index + 1) % len(self._keys)
        return key


_key_ring = None
_key_ring_lock = threading.Lock()


def get_key_ring():
    global _key_ring
    with _key_ring_lock:
        if _key_ring is None:
            _key_ring = KeyRing(settings.TOGETHER_API_KEYS)
            if len(_key_ring):
                logger.info("Loaded %s Together AI API keys for rotation", len(_key_ring))
            else:
                logger.warning("No Together AI API keys found in TOGETHER_API_KEYS")
        return _key_ring


def reset_key_ring():
    """Forget the cached key ring so the next call re-reads the settings."""
    global _key_ring
    with _key_ring_lock:
        _key_ring = None


def _post(path, payload):
    key = get_key_ring().next_key()
    url = f"{settings.TOGETHER_API_BASE.rstrip('/')}/{path}"
    try:
        response = requests.post(
            url,
            headers={'Authorization': f'Bearer {key}', 'Content-Type': 'application/json'},
            json=payload,
            timeout=settings.TOGETHER_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        body = exc.response.text[:300] if exc.response is not None else ''
        logger.error("Together AI %s returned %s: %s", path, status, body)
        raise AssistantError(f'Provider returned HTTP {status}') from exc
    except requests.RequestException as exc:
        logger.error("Together AI %s request failed: %s", path, exc)
        raise AssistantError(str(exc)) from exc
    except ValueError as exc:
        logger.error("Together AI %s returned invalid JSON", path)
        raise AssistantError('Provider returned an invalid response') from exc


def chat_completion(messages, vision=False, fallback='Sorry, I couldn\'t generate a response.'):
    """
    Run a chat completion and return ``(content, completion_id)``.
    ``vision`` picks the multi-modal model, needed as soon as one message carries an image.
    """
    model = settings.TOGETHER_VISION_MODEL if vision else settings.TOGETHER_TEXT_MODEL
    data = _post('chat/completions', {
        'model': model,
        'messages': messages,
        'max_tokens': MAX_TOKENS,
        'temperature': TEMPERATURE,
    })

    choices = data.get('choices') or []
    message = choices[0].get('message') if choices else None
    content = message.get('content') if message else None
    logger.info("Chat completion %s from %s", data.get('id'), model)
    return (content or fallback), data.get('id')


def generate_image(prompt, width=1024, height=768, steps=4):
    """Return the base64 (or URL) of one generated image."""
    data = _post('images/generations', {
        'model': settings.TOGETHER_IMAGE_MODEL,
        'prompt': prompt,
        'width': width,
        'height': height,
        'steps': steps,
        'n': 1,
        'response_format': 'b64_json',
    })

    images = data.get('data') or []
    if not images:
        raise AssistantError('No image data returned from API')
    image = images[0].get('b64_json') or images[0].get('url')
    if not image:
        raise AssistantError('No image data returned from API')
    return image
