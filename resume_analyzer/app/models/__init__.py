from resume_analyzer.app.models.user import User
from resume_analyzer.app.models.resume_analysis import ResumeAnalysis
