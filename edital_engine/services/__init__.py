from .evaluation_service import BatchItemResult, EvaluationService, batch_summary

__all__ = ["BatchItemResult", "EvaluationService", "batch_summary"]
