from typing import NewType

TournamentId = NewType("TournamentId", int)
StageId = NewType("StageId", int)
GroupId = NewType("GroupId", int)
MatchId = NewType("MatchId", int)
TeamId = NewType("TeamId", int)
IntakeMappingId = NewType("IntakeMappingId", int)
StageStandingId = NewType("StageStandingId", int)
TournamentTeamId = NewType("TournamentTeamId", int)
