"""
Ready-made dialogs built on TurnDispatcher.
"""
from .common_responses import CommonResponsesDialog
from .qna import QnADialog

__all__ = ["CommonResponsesDialog", "QnADialog"]
