"""Staff domain - Team members who deliver a business's services"""
