# bontemp/services/safety_service.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask
from openai import OpenAI

# Guideline categories checked on every comment, mapped to the moderation
# endpoint categories that make up each one.
HARM_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    'HARM_CATEGORY_HATE_SPEECH': ('hate', 'hate/threatening'),
    'HARM_CATEGORY_HARASSMENT': ('harassment', 'harassment/threatening'),
    'HARM_CATEGORY_SEXUALLY_EXPLICIT': ('sexual', 'sexual/minors'),
    'HARM_CATEGORY_DANGEROUS_CONTENT': (
        'violence', 'violence/graphic',
        'self-harm', 'self-harm/intent', 'self-harm/instructions',
        'illicit', 'illicit/violent',
    ),
}

# Minimum moderation score that blocks a comment, per severity threshold
BLOCK_THRESHOLDS: Dict[str, float] = {
    'BLOCK_LOW_AND_ABOVE': 0.25,
    'BLOCK_MEDIUM_AND_ABOVE': 0.5,
    'BLOCK_ONLY_HIGH': 0.75,
}

UNSAFE_TOKEN = 'UNSAFE'
SAFE_TOKEN = 'SAFE'

CLASSIFICATION_PROMPT = """You are the moderator of a friendly photo-sharing community.
Classify the user comment below against the community guidelines.
A comment is UNSAFE if it contains hate speech, harassment or bullying, sexual content,
or dangerous content (violence, self-harm, illegal activities). Otherwise it is SAFE.
The comment may be written in any language, usually Italian.
Answer with exactly one word: SAFE or UNSAFE."""


@dataclass
class SafetyVerdict:
    """
    Outcome of a classification.

    ``block_reason`` is set when the provider blocked the text outright;
    ``verdict`` is the raw answer of the classification model.
    """
    verdict: str = ''
    block_reason: Optional[str] = None
    flagged_categories: List[str] = field(default_factory=list)

    @property
    def is_unsafe(self) -> bool:
        """Rejects only on an explicit signal: a block reason or an UNSAFE verdict."""
        return bool(self.block_reason) or UNSAFE_TOKEN in self.verdict.upper()

    @property
    def is_ambiguous(self) -> bool:
        """True when the model answered neither SAFE nor UNSAFE."""
        return not self.block_reason and SAFE_TOKEN not in self.verdict.upper()


class SafetyService:
    """
    Text safety classification on top of the OpenAI API.

    The moderation endpoint supplies the structured block signal (category scores
    compared with the configured threshold); a chat completion supplies the verdict.
    """

    def __init__(self):
        """The client is created in init_app."""
        self.client = None
        self.model = None
        self.moderation_model = None
        self.threshold = BLOCK_THRESHOLDS['BLOCK_MEDIUM_AND_ABOVE']

    def init_app(self, app: Flask):
        """
        Creates the OpenAI client from the app configuration.

        :param app: Flask application object
        """
        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY must be set in .env or in the environment.")

        threshold_name = app.config.get('SAFETY_BLOCK_THRESHOLD', 'BLOCK_MEDIUM_AND_ABOVE')
        if threshold_name not in BLOCK_THRESHOLDS:
            raise ValueError(f"Unknown SAFETY_BLOCK_THRESHOLD '{threshold_name}'. Allowed: {', '.join(BLOCK_THRESHOLDS)}")

        self.configure(
            OpenAI(api_key=api_key, base_url=app.config.get('OPENAI_BASE_URL') or None),
            model=app.config.get('SAFETY_MODEL', 'gpt-4o-mini'),
            moderation_model=app.config.get('MODERATION_MODEL', 'omni-moderation-latest'),
            threshold=BLOCK_THRESHOLDS[threshold_name]
        )
        logging.info(f"SafetyService: classifier ready (model: {self.model}, threshold: {threshold_name}).")

    def configure(self, client: Any, model: str, moderation_model: str, threshold: float):
        self.client = client
        self.model = model
        self.moderation_model = moderation_model
        self.threshold = threshold

    def classify(self, text: str) -> SafetyVerdict:
        """
        Classifies a comment. API and response errors are raised to the caller.

        :param text: trimmed comment text
        :return: SafetyVerdict
        """
        if not self.client:
            raise RuntimeError("SafetyService is not initialized. Call init_app first.")

        moderation = self.client.moderations.create(model=self.moderation_model, input=text)
        blocked = self._blocked_categories(moderation.results[0])
        if blocked:
            return SafetyVerdict(block_reason='SAFETY', flagged_categories=blocked)

        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": CLASSIFICATION_PROMPT},
                {"role": "user", "content": f"Comment:\n\"\"\"\n{text}\n\"\"\""}
            ],
            temperature=0,
            max_tokens=5
        )
        choice = completion.choices[0]
        verdict = (choice.message.content or '').strip()
        if choice.finish_reason == 'content_filter':
            return SafetyVerdict(verdict=verdict, block_reason='CONTENT_FILTER')
        return SafetyVerdict(verdict=verdict)

    def _blocked_categories(self, result: Any) -> List[str]:
        """Guideline categories whose highest moderation score reaches the threshold."""
        scores = result.category_scores.model_dump(by_alias=True)
        blocked = []
        for category, moderation_categories in HARM_CATEGORIES.items():
            top_score = max((scores.get(name) or 0.0) for name in moderation_categories)
            if top_score >= self.threshold:
                blocked.append(category)
        return blocked
