from .admin import router as admin
from .auth import router as auth
from .quizzes import router as quizzes
from .user_stats import router as user_stats
from .users import router as users
