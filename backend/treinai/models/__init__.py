from .user import User, Profile, UserRole
from .coaching import Professional, Student, CrefStatus
from .workout import Exercise, Workout, WorkoutExercise, WorkoutHistory
