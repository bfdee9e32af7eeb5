import re
import unicodedata
import uuid

def gen_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


_NON_SLUG = re.compile(r"[^a-z0-9]+")

def slugify(value: str, *, fallback: str = "item", max_length: int = 120) -> str:
    # ascii-fold so "Café Bot" -> "cafe-bot"
    folded = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG.sub("-", folded.lower()).strip("-")
    slug = slug[:max_length].rstrip("-")
    return slug or fallback
