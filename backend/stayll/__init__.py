"""
Stayll listing service - AI listing generation and engagement analytics
"""
