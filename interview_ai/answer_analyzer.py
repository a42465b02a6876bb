from typing import Optional, Tuple
import logging

from .config import PipelineConfig
from .gateway import InferenceGateway
from .schemas import AnswerAnalysis, InterviewQuestion, Project, Sentiment
from .scoring_rules import AnswerSignals, complexity_for, dimension_scores, evaluate_rules, extract_keywords

logger = logging.getLogger('answer_analyzer')

EMPTY_ANSWER_CONFIDENCE = 30
DEFAULT_CONFIDENCE = 50
MIN_ESTIMATED_SECONDS = 5
MAX_ESTIMATED_SECONDS = 25

# Label ids used by the default cardiffnlp sentiment model
LABEL_IDS = {
    'label_0': Sentiment.NEGATIVE,
    'label_1': Sentiment.NEUTRAL,
    'label_2': Sentiment.POSITIVE,
}

def normalize_label(label: str) -> Sentiment:
    label = (label or '').strip().lower()
    if label in LABEL_IDS:
        return LABEL_IDS[label]
    if 'pos' in label:
        return Sentiment.POSITIVE
    if 'neg' in label:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL

class AnswerAnalyzer:
    def __init__(self, gateway: Optional[InferenceGateway] = None, config: Optional[PipelineConfig] = None):
        self.gateway = gateway
        self.config = config or PipelineConfig()

    def estimate_response_time(self, word_count: int) -> float:
        """Speaking time at the configured rate, kept between 5 and 25 seconds."""
        seconds = word_count * 60.0 / self.config.speaking_rate_wpm
        return float(round(min(MAX_ESTIMATED_SECONDS, max(MIN_ESTIMATED_SECONDS, seconds))))

    def remote_sentiment(self, answer_text: str) -> Tuple[Sentiment, float]:
        """Sentiment from the remote classifier, or neutral/50 when it cannot be had."""
        if self.gateway is None or not self.gateway.sentiment_model_available:
            return Sentiment.NEUTRAL, DEFAULT_CONFIDENCE

        result = self.gateway.call_sentiment_model(answer_text)
        if not result.ok:
            logger.warning(f"Sentiment analysis failed, using neutral: {result.reason}")
            return Sentiment.NEUTRAL, DEFAULT_CONFIDENCE

        confidence = round(max(0.0, min(1.0, result.value.score)) * 100)
        return normalize_label(result.value.label), confidence

    def build_analysis(self, answer_text: str, sentiment: Sentiment, confidence: float,
                       question: InterviewQuestion, response_time: Optional[float] = None) -> AnswerAnalysis:
        """Deterministic scoring of an answer given its sentiment signal."""
        signals = AnswerSignals.from_text(answer_text, question.category)
        outcome = evaluate_rules(signals)
        dimensions = dimension_scores(signals)

        if response_time is None:
            response_time = self.estimate_response_time(signals.word_count)

        return AnswerAnalysis(
            score=outcome['score'],
            strengths=outcome['strengths'],
            weaknesses=outcome['weaknesses'],
            suggestions=outcome['suggestions'],
            technical_accuracy=dimensions['technical_accuracy'],
            communication_clarity=dimensions['communication_clarity'],
            problem_solving_approach=dimensions['problem_solving_approach'],
            sentiment=sentiment,
            confidence=confidence,
            keywords=extract_keywords(answer_text),
            response_time=max(0.0, float(response_time)),
            complexity=complexity_for(signals.word_count),
            industry_relevance=dimensions['industry_relevance'],
            code_quality=dimensions['code_quality']
        )

    def analyze_answer(self, question: InterviewQuestion, answer_text: str,
                       project: Optional[Project] = None, response_time: Optional[float] = None) -> AnswerAnalysis:
        """
        Score one answer.

        Args:
            question: The question that was answered
            answer_text: Transcribed or typed answer
            project: Project the question is about, if known
            response_time: Measured seconds from question shown to answer submitted

        Returns:
            AnswerAnalysis for this submission
        """
        project_title = project.title if project else question.project_title
        logger.info(f"Analyzing answer for question: {question.id} ({project_title})")

        if not answer_text or not answer_text.strip():
            return self.build_analysis('', Sentiment.NEUTRAL, EMPTY_ANSWER_CONFIDENCE, question, response_time)

        sentiment, confidence = self.remote_sentiment(answer_text)
        return self.build_analysis(answer_text, sentiment, confidence, question, response_time)
