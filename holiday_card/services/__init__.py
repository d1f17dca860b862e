"""
Service layer for the holiday card backend.

- card_layout: card geometry and overlay rendering
- card_compositor: photo + overlay compositing and JPEG encoding
- style_transfer: hosted image-to-image call with ordered model fallback
- upload_staging: per-request temporary storage of uploads
- person_region: standalone skin-tone / sweater pattern heuristics
"""
