"""HTTP API for GyanSetu."""
