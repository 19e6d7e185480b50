import logging

logger = logging.getLogger(__name__)

# ============================================================
# KEYWORD TABLE
# ============================================================

# Scanned top to bottom; the first topic with a keyword inside the query wins.
# Keywords overlap on purpose ("work", "job", "hire"), so the order decides.
KEYWORD_TABLE = [
    ("skills", ("skill", "technology", "tech", "know", "proficient", "good at", "expertise")),
    ("experience", ("work", "job", "experience", "company", "worked", "career", "employment")),
    ("projects", ("project", "built", "created", "portfolio", "work", "developed")),
    ("education", ("education", "degree", "study", "university", "learn", "course")),
    ("contact", ("contact", "reach", "email", "connect", "get in touch", "hire")),
    ("location", ("location", "where", "based", "live", "city")),
    ("availability", ("available", "hire", "hiring", "looking", "job")),
    ("technologies", ("use", "stack", "tools", "framework", "library")),
    ("strengths", ("strength", "good", "best", "achievement")),
    ("interests", ("interest", "hobby", "passion", "like", "enjoy")),
]

FALLBACK_RESPONSE = (
    "I'd be happy to tell you more! You can ask me about my skills, experience, "
    "projects, education, contact information, or availability. "
    "What would you like to know?"
)

# ============================================================
# MATCHING
# ============================================================

def match_topic(query):
    """
    Returns the first topic whose keywords appear in the query, or None.
    Plain substring containment on the lower-cased text, so "job" also hits
    "jobseeker".
    """
    text = (query or "").lower()
    for topic, keywords in KEYWORD_TABLE:
        if any(word in text for word in keywords):
            return topic
    return None


def find_best_match(query, kb):
    """Canned answer for `query` from the knowledge base, or the help text."""
    topic = match_topic(query)
    answer = kb.get(topic) if topic else None
    if not answer:
        logger.debug("No topic matched for query %r", query)
        return FALLBACK_RESPONSE
    logger.debug("Query %r matched topic %s", query, topic)
    return answer
