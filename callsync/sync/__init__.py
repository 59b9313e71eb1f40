"""Call → activity sync engine shared by the webhook and scheduled triggers."""
