"""
inquirylab - Guided, branching inquiry lessons for a single learner.

Plays an authored lesson script (narration, questions, lab actions, branches)
and routes the learner through it based on their answers.
"""

__version__ = "0.1.0"
