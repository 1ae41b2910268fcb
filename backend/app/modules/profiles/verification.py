from app.models.profile import LandlordVerificationStatus, VerificationLevel


def verification_level(
    phone_verified: bool = False,
    email_verified: bool = False,
    business_license_verified: bool = False,
) -> VerificationLevel:
    """
    Trust tier from the landlord's verification milestones.

    A verified business license is premium on its own; phone plus email is
    verified; anything less is basic. Setting more flags never lowers the tier.
    """
    if business_license_verified:
        return VerificationLevel.PREMIUM
    if phone_verified and email_verified:
        return VerificationLevel.VERIFIED
    return VerificationLevel.BASIC


def verification_status(
    phone_verified: bool = False,
    email_verified: bool = False,
    identity_verified: bool = False,
    business_license_verified: bool = False,
) -> LandlordVerificationStatus:
    return LandlordVerificationStatus(
        phone_verified=phone_verified,
        email_verified=email_verified,
        identity_verified=identity_verified,
        business_license_verified=business_license_verified,
        verification_level=verification_level(
            phone_verified, email_verified, business_license_verified
        )
    )
