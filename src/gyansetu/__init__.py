"""GyanSetu: course-scoped academic questions and answers."""

__version__ = "0.1.0"
