"""Camera models.

``thin_lens`` declares Taichi fields; import it after ``ti.init``.
"""
