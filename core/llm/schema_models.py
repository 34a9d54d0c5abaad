"""JSON schemas requested from the LLM."""

MATCH_SCORE_SCHEMA = {
    "name": "match_score_schema",
    "strict": True,
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "score": {"type": "number", "minimum": 0, "maximum": 100},
            "skill_match": {"type": "number", "minimum": 0, "maximum": 100},
            "interest_match": {"type": "number", "minimum": 0, "maximum": 100},
            "experience_match": {"type": "number", "minimum": 0, "maximum": 100},
            "reasoning": {"type": "string"},
            "matched_skills": {"type": "array", "items": {"type": "string"}},
            "suggestions": {"type": "string"},
        },
        "required": [
            "score",
            "skill_match",
            "interest_match",
            "experience_match",
            "reasoning",
            "matched_skills",
            "suggestions",
        ],
    },
}
