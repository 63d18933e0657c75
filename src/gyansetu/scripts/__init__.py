"""Operational scripts for GyanSetu."""
