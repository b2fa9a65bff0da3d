"""
Generación de slugs URL-safe a partir de nombres.
"""
import re
import unicodedata

# Letras que NFKD no descompone en base + diacrítico
_TRANSLITERATIONS = str.maketrans({
    "đ": "d", "Đ": "d",
    "ß": "ss",
    "æ": "ae", "Æ": "ae",
    "ø": "o", "Ø": "o",
    "ł": "l", "Ł": "l",
    "œ": "oe", "Œ": "oe",
})


def slugify(text: str) -> str:
    """
    Convertir un texto en slug: minúsculas, sin acentos, solo [a-z0-9-].

    Ejemplos:
        "Điện thoại & Máy tính" -> "dien-thoai-may-tinh"
        "  Ropa de Niños " -> "ropa-de-ninos"

    Returns:
        Slug generado (cadena vacía si no queda ningún carácter válido)
    """
    text = str(text or "").strip().translate(_TRANSLITERATIONS)
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")


def normalize_slug(slug: str) -> str:
    """
    Normalizar un slug recibido del cliente.

    Pasa por slugify para que también quede URL-safe:
    "Phones & Tablets/2024" -> "phones-tablets-2024".
    """
    return slugify(slug)
