"""
Module 'payments' (feature-first): passerelle Razorpay, vérification de
signature et rapprochement des paiements sur les commandes.
"""
