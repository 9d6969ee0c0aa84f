"""Services Layer — orchestrates travel plans, the resilient invoker and the parser.

Invariants:
    - Services raise PiggyBankError subclasses; they never build HTTP responses

Design Decisions:
    - Collaborators passed to constructors (repository, invoker, prompt builder)
"""
