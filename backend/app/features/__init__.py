"""
Analytics features.

Data features own persistence:
- activities/ - activity history and variation stores
- users/ - birth date lookup
- plans/ - training plans and their workouts

Analytics features own the logic, each with calculators/ (pure code),
service.py (orchestration over repositories) and schemas.py (API models):
- variation/ - pace / heart-rate coefficients of variation
- classification/ - rule-based workout type labels
- skill_level/ - population tiers via PCA composite and k-means
- safety/ - safe pace baselines and training plan clamps
"""
