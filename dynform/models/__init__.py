from dynform.models.submission import Submission

__all__ = ["Submission"]
