"""
Validation Module.

Side-effect-free checks run before any store mutation:
- Validator: rating range, review length/emptiness, game id, feed limit
- Sanitizer: optional clean-up and safety screening of review text
"""
